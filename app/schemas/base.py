
from pydantic import BaseModel, ConfigDict
from typing import Optional
from datetime import datetime

class ORMSchema(BaseModel):
    """支持从 ORM 对象直接生成 Schema"""

    model_config = ConfigDict(from_attributes=True)


class BaseSchema(ORMSchema):
    """基础响应字段"""
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
