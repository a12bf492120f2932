"""测试配置和 fixtures"""
import pytest
from datetime import date
from unittest.mock import Mock
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from redlock import Redlock

from app.db.base import Base
from app.core.dependencies import get_db, get_redlock
from app.core.security import create_access_token
from app.main import app
from app.models import Product, Category, Shelf, Stock


@pytest.fixture
def db_engine():
    """内存 SQLite 引擎（所有连接共享同一个库）"""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False,
    )
    Base.metadata.create_all(engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(engine)
        engine.dispose()


@pytest.fixture
def db_session(db_engine):
    """创建数据库会话"""
    SessionLocal = sessionmaker(bind=db_engine, autoflush=False)
    db = SessionLocal()

    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def mock_redlock():
    """创建模拟 Redlock 分布式锁"""
    redlock_mock = Mock(spec=Redlock)
    lock_mock = Mock()
    redlock_mock.lock.return_value = lock_mock
    redlock_mock.unlock.return_value = True
    return redlock_mock


@pytest.fixture
def sample_product_data():
    """示例商品数据"""
    return {
        "product_id": 1,
        "name": "Mineral Water 0.5L",
        "description": "Still water",
        "category": "Beverages",
        "price_cents": 129,
        "shelf_id": None
    }


@pytest.fixture
def make_product(db_session):
    """直接写库创建商品"""
    def _make(product_id=1, category=Category.BEVERAGES, shelf_id=None, name=None):
        product = Product(
            product_id=product_id,
            name=name or f"Product {product_id}",
            category=category,
            price_cents=100,
            shelf_id=shelf_id,
        )
        db_session.add(product)
        db_session.commit()
        return product
    return _make


@pytest.fixture
def make_shelf(db_session):
    """直接写库创建货架"""
    def _make(shelf_id=5, product_ids=None, capacity=3):
        shelf = Shelf.with_slots(shelf_id, capacity, product_ids)
        db_session.add(shelf)
        db_session.commit()
        return shelf
    return _make


@pytest.fixture
def make_stock(db_session):
    """直接写库创建库存记录"""
    def _make(product_id=1, day=date(2024, 1, 1), in_stock=0, on_the_shelf=0, purchased_today=0):
        stock = Stock(
            product_id=product_id,
            day=day,
            in_stock=in_stock,
            on_the_shelf=on_the_shelf,
            purchased_today=purchased_today,
        )
        db_session.add(stock)
        db_session.commit()
        return stock
    return _make


@pytest.fixture
def client(db_session):
    """测试客户端：数据库替换为内存 SQLite，不使用分布式锁"""
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_redlock] = lambda: None
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def manager_headers():
    token = create_access_token("manager01", roles=["Manager"])
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def user_headers():
    token = create_access_token("clerk01", roles=["Clerk"])
    return {"Authorization": f"Bearer {token}"}
