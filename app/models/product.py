import enum

from sqlalchemy import (
    Column,
    BigInteger,
    Integer,
    String,
    Text,
    TIMESTAMP,
    Enum,
    ForeignKey,
    CheckConstraint,
    Index,
    func,
)
from sqlalchemy.orm import relationship
from app.db.base import Base


# 商品分类枚举
class Category(str, enum.Enum):
    BEVERAGES = "Beverages"
    BAKERY = "Bakery"
    DAIRY = "Dairy"
    PRODUCE = "Produce"
    MEAT = "Meat"
    FROZEN = "Frozen"
    SNACKS = "Snacks"
    HOUSEHOLD = "Household"
    OTHER = "Other"


class Product(Base):
    __tablename__ = "products"

    # 商品ID由客户端指定，不自增
    product_id = Column(
        BigInteger,
        primary_key=True,
        autoincrement=False,
        comment="商品ID（客户端分配）",
    )

    name = Column(
        String(255),
        nullable=False,
        comment="商品名称",
    )

    description = Column(
        Text,
        nullable=True,
        comment="商品描述",
    )

    category = Column(
        Enum(
            Category,
            name="product_category_type",
            values_callable=lambda e: [m.value for m in e],
        ),
        nullable=False,
        comment="商品分类",
    )

    price_cents = Column(
        Integer,
        nullable=False,
        server_default="0",
        comment="单价（分）",
    )

    shelf_id = Column(
        BigInteger,
        ForeignKey("shelves.shelf_id"),
        nullable=True,
        comment="陈列货架ID",
    )

    created_at = Column(
        TIMESTAMP(timezone=True),
        server_default=func.now(),
        nullable=False,
    )

    updated_at = Column(
        TIMESTAMP(timezone=True),
        server_default=func.now(),
        nullable=False,
        onupdate=func.now(),
    )

    # 只读方向：货架槽位由货架一侧独立维护
    shelf = relationship("Shelf", viewonly=True)

    __table_args__ = (
        CheckConstraint(
            "price_cents >= 0",
            name="ck_price_cents_non_negative",
        ),
    )


# 按分类筛选列表
Index(
    "idx_products_category",
    Product.category,
)
