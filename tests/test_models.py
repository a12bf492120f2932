"""模型单元测试"""
import pytest
from datetime import date
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from app.models.product import Product, Category
from app.models.shelf import Shelf, ShelfSlot
from app.models.stock import Stock


class TestModels:
    """数据模型测试类"""

    def test_product_model(self, db_session):
        """测试商品模型（ID由调用方指定）"""
        product = Product(
            product_id=42,
            name="Rye Bread",
            category=Category.BAKERY,
            price_cents=250,
        )
        db_session.add(product)
        db_session.commit()

        saved_product = db_session.get(Product, 42)
        assert saved_product.product_id == 42
        assert saved_product.name == "Rye Bread"
        assert saved_product.category == Category.BAKERY
        assert saved_product.shelf_id is None
        assert saved_product.created_at is not None
        assert saved_product.updated_at is not None

    def test_product_shelf_relationship(self, db_session, make_shelf):
        """测试商品到货架的只读关联"""
        make_shelf(shelf_id=5)
        product = Product(product_id=1, name="Milk", category=Category.DAIRY, shelf_id=5)
        db_session.add(product)
        db_session.commit()

        assert db_session.get(Product, 1).shelf.shelf_id == 5

    def test_shelf_with_slots(self, db_session):
        """测试按容量生成槽位"""
        shelf = Shelf.with_slots(7, 4, [3, None, 9], name="A-1")
        db_session.add(shelf)
        db_session.commit()

        saved_shelf = db_session.get(Shelf, 7)
        assert saved_shelf.capacity == 4
        assert saved_shelf.product_ids == [3, None, 9, None]
        assert [slot.position for slot in saved_shelf.slots] == [0, 1, 2, 3]

    def test_shelf_with_too_many_slots(self):
        """测试槽位超出容量"""
        with pytest.raises(ValueError):
            Shelf.with_slots(7, 2, [1, 2, 3])

    def test_shelf_delete_cascades_slots(self, db_session, make_shelf):
        """测试删除货架时一并删除槽位"""
        shelf = make_shelf(shelf_id=5, product_ids=[1])
        db_session.delete(shelf)
        db_session.commit()

        slots = db_session.execute(select(ShelfSlot)).scalars().all()
        assert slots == []

    def test_stock_model(self, db_session, make_product):
        """测试库存模型"""
        make_product(product_id=1)
        stock = Stock(product_id=1, day=date(2024, 1, 1), in_stock=10, on_the_shelf=4, purchased_today=2)
        db_session.add(stock)
        db_session.commit()

        saved_stock = db_session.execute(select(Stock)).scalar_one()
        assert saved_stock.id is not None
        assert saved_stock.in_stock == 10
        assert saved_stock.on_the_shelf == 4
        assert saved_stock.purchased_today == 2

    def test_stock_unique_per_day(self, db_session, make_product, make_stock):
        """测试同一商品同一天只能有一条库存记录"""
        make_product(product_id=1)
        make_stock(product_id=1, day=date(2024, 1, 1))

        db_session.add(Stock(product_id=1, day=date(2024, 1, 1), in_stock=3))
        with pytest.raises(IntegrityError):
            db_session.commit()
        db_session.rollback()

    def test_stock_non_negative(self, db_session, make_product):
        """测试库存数量不能为负"""
        make_product(product_id=1)
        db_session.add(Stock(product_id=1, day=date(2024, 1, 1), in_stock=-1))
        with pytest.raises(IntegrityError):
            db_session.commit()
        db_session.rollback()
