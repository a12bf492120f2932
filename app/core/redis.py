"""Redis 客户端与分布式锁配置模块"""

from redis.asyncio import Redis as AsyncRedis
from redlock import Redlock

from app.core.config import settings

REDIS_URL = settings.redis_url

# 启动时健康检查使用
async_redis = AsyncRedis.from_url(REDIS_URL, decode_responses=True)

# Redlock 配置（支持单实例和多实例）
def create_redlock():
    """根据配置动态创建 Redlock 实例

    未开启 LOCK_ENABLED 或没有配置任何 Redis 主机时返回 None，写操作不加锁。
    """
    if not settings.LOCK_ENABLED:
        return None

    redis_hosts = (settings.REDIS_HOSTS or settings.REDIS_HOST or "").strip()
    hosts = [host.strip() for host in redis_hosts.split(",") if host.strip()]
    if not hosts:
        return None

    # 多实例模式下每个主机一个节点
    servers = [
        {"host": host, "port": settings.REDIS_PORT, "db": settings.REDIS_DB}
        for host in hosts
    ]
    return Redlock(servers)

redlock = create_redlock()

# 导出
__all__ = [
    "async_redis",
    "redlock",
    "create_redlock",
    "REDIS_URL"
]
