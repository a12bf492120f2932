"""商品接口的 Pydantic 模型"""

from datetime import date
from typing import Any, Optional

from pydantic import BaseModel, Field

from app.models.product import Category
from app.schemas.base import BaseSchema, ORMSchema

# 主键列为有符号 BIGINT
MAX_ID = 2 ** 63 - 1


# ==================== 请求模型 ====================

class ProductBase(BaseModel):
    product_id: int = Field(
        ...,
        ge=0,
        le=MAX_ID,
        description="商品ID（客户端分配）",
        examples=[1]
    )
    name: str = Field(
        ...,
        min_length=1,
        max_length=255,
        description="商品名称",
        examples=["Mineral Water 0.5L"]
    )
    description: Optional[str] = Field(
        None,
        description="商品描述"
    )
    category: Category = Field(
        ...,
        description="商品分类",
        examples=[Category.BEVERAGES]
    )
    price_cents: int = Field(
        0,
        ge=0,
        description="单价（分）",
        examples=[129]
    )
    shelf_id: Optional[int] = Field(
        None,
        ge=0,
        le=MAX_ID,
        description="陈列货架ID",
        examples=[None]
    )


class ProductCreate(ProductBase):
    """创建商品请求

    shelf 是货架一侧的反向引用，创建/修改商品时必须为空，
    货架槽位只能由货架自身维护。
    """
    shelf: Optional[Any] = Field(
        None,
        description="反向货架引用，必须为空"
    )

    def scalar_fields(self) -> dict:
        """可覆盖写入的标量字段（不含主键）"""
        return self.model_dump(include={"name", "description", "category", "price_cents", "shelf_id"})


class ProductUpdate(ProductCreate):
    """修改商品请求（product_id 与路径不同时视为改号）"""


# ==================== 响应模型 ====================

class ProductResponse(ProductBase, BaseSchema):
    """商品详情"""


class StockResponse(ORMSchema):
    """某天的库存快照"""
    product_id: int
    day: date
    in_stock: int
    on_the_shelf: int
    purchased_today: int


class PRequest(BaseModel):
    """商品 + 最新库存"""
    product: ProductResponse
    stock: StockResponse
