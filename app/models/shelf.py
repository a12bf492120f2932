from sqlalchemy import (
    Column,
    BigInteger,
    Integer,
    String,
    ForeignKey,
    CheckConstraint,
)
from sqlalchemy.orm import relationship
from app.db.base import Base


class Shelf(Base):
    """货架：固定数量的有序槽位，每个槽位可放一个商品"""
    __tablename__ = "shelves"

    shelf_id = Column(
        BigInteger,
        primary_key=True,
        autoincrement=False,
        comment="货架ID",
    )

    name = Column(
        String(128),
        nullable=True,
        comment="货架名称",
    )

    capacity = Column(
        Integer,
        nullable=False,
        comment="槽位数量",
    )

    slots = relationship(
        "ShelfSlot",
        order_by="ShelfSlot.position",
        cascade="all, delete-orphan",
        back_populates="shelf",
    )

    @property
    def product_ids(self):
        """按槽位顺序返回商品ID（空槽位为 None）"""
        return [slot.product_id for slot in self.slots]

    @classmethod
    def with_slots(cls, shelf_id: int, capacity: int, product_ids=None, name: str = None) -> "Shelf":
        """创建货架并按容量生成全部槽位"""
        product_ids = list(product_ids or [])
        if len(product_ids) > capacity:
            raise ValueError("槽位数量超过货架容量")
        product_ids += [None] * (capacity - len(product_ids))
        shelf = cls(shelf_id=shelf_id, capacity=capacity, name=name)
        shelf.slots = [
            ShelfSlot(position=index, product_id=product_id)
            for index, product_id in enumerate(product_ids)
        ]
        return shelf

    __table_args__ = (
        CheckConstraint(
            "capacity > 0",
            name="ck_shelf_capacity_positive",
        ),
    )


class ShelfSlot(Base):
    __tablename__ = "shelf_slots"

    shelf_id = Column(
        BigInteger,
        ForeignKey("shelves.shelf_id", ondelete="CASCADE"),
        primary_key=True,
        comment="货架ID",
    )

    position = Column(
        Integer,
        primary_key=True,
        comment="槽位序号（从0开始）",
    )

    # 不是外键：引用一致性由商品的删除/改号操作维护
    product_id = Column(
        BigInteger,
        nullable=True,
        index=True,
        comment="槽位上的商品ID",
    )

    shelf = relationship("Shelf", back_populates="slots")
