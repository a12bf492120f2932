from .base import Base
from .session import engine
# db/init_db.py

from app.models import *

def init_db(bind=None):
    """按模型定义建表（不负责迁移）"""
    Base.metadata.create_all(bind=bind or engine)
# Export for convenience
__all__ = ["Base", "engine", "init_db"]
