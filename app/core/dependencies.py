"""依赖注入配置模块"""

# 数据库会话依赖
from app.db.session import SessionLocal
from sqlalchemy.orm import Session

# 分布式锁依赖
from app.core.redis import redlock


def get_redlock():
    """获取 Redlock 分布式锁实例（未启用或未配置服务器时返回 None）"""
    if redlock is None or not getattr(redlock, "servers", None):
        return None
    return redlock

def get_db() -> Session:
    """获取数据库会话"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
