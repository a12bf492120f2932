from sqlalchemy import (
    Column,
    BigInteger,
    Integer,
    Date,
    ForeignKey,
    CheckConstraint,
    UniqueConstraint,
    Index,
)
from app.db.base import Base


class Stock(Base):
    __tablename__ = "stock"

    id = Column(
        BigInteger().with_variant(Integer, "sqlite"),
        primary_key=True,
        autoincrement=True,
    )

    product_id = Column(
        BigInteger,
        ForeignKey("products.product_id"),
        nullable=False,
        comment="商品ID",
    )

    day = Column(
        Date,
        nullable=False,
        comment="统计日期",
    )

    in_stock = Column(
        Integer,
        nullable=False,
        server_default="0",
        comment="库存数量",
    )

    on_the_shelf = Column(
        Integer,
        nullable=False,
        server_default="0",
        comment="上架数量",
    )

    purchased_today = Column(
        Integer,
        nullable=False,
        server_default="0",
        comment="当日售出数量",
    )

    # 每个商品每天只有一条库存记录
    __table_args__ = (
        UniqueConstraint(
            "product_id",
            "day",
            name="uq_stock_product_day",
        ),
        CheckConstraint(
            "in_stock >= 0",
            name="ck_in_stock_non_negative",
        ),
        CheckConstraint(
            "on_the_shelf >= 0",
            name="ck_on_the_shelf_non_negative",
        ),
        CheckConstraint(
            "purchased_today >= 0",
            name="ck_purchased_today_non_negative",
        ),
    )


# 查询最新库存：按商品 + 日期倒序
Index(
    "idx_stock_product_day_desc",
    Stock.product_id,
    Stock.day.desc(),
)
