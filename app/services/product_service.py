"""商品服务实现"""

from fastapi import HTTPException
from sqlalchemy import select, update, delete
from sqlalchemy.orm import Session
from typing import List, Optional
from datetime import date
import logging
from redlock import Redlock

from app.core.config import settings
from app.models.product import Product, Category
from app.models.shelf import Shelf, ShelfSlot
from app.models.stock import Stock
from app.schemas.product import (
    ProductCreate,
    ProductUpdate,
    ProductResponse,
    StockResponse,
    PRequest,
)

logger = logging.getLogger(__name__)


class ProductService:
    """商品核心服务类

    负责商品的增删改查，并维护商品与货架槽位、库存记录之间的引用。
    所有多步写操作都在同一个数据库事务中完成。
    """

    def __init__(self, db: Session, rlock: Redlock = None):
        self.db = db
        self.rlock = rlock

    # ==================== 查询 ====================

    def list_products(self, category: Optional[Category] = None) -> List[PRequest]:
        """查询商品列表（可按分类筛选）"""
        stmt = select(Product).order_by(Product.product_id)
        if category is not None:
            stmt = stmt.where(Product.category == category)

        products = self.db.execute(stmt).scalars().all()
        return [self._assemble(product) for product in products]

    def get_product(self, product_id: int) -> PRequest:
        """查询单个商品及其最新库存"""
        product = self.db.get(Product, product_id)
        if product is None:
            raise HTTPException(status_code=404, detail="商品不存在")
        return self._assemble(product)

    def current_stock(self, product_id: int) -> Stock:
        """最新库存记录；没有记录时返回当天的零库存（不落库）"""
        stock = self.db.execute(
            select(Stock)
            .where(Stock.product_id == product_id)
            .order_by(Stock.day.desc())
            .limit(1)
        ).scalar_one_or_none()

        if stock is None:
            stock = Stock(
                product_id=product_id,
                day=date.today(),
                in_stock=0,
                on_the_shelf=0,
                purchased_today=0,
            )
        return stock

    def _assemble(self, product: Product) -> PRequest:
        return PRequest(
            product=ProductResponse.model_validate(product),
            stock=StockResponse.model_validate(self.current_stock(product.product_id)),
        )

    # ==================== 写操作 ====================

    def create_product(self, payload: ProductCreate) -> Product:
        """创建商品"""
        locks = self._acquire_locks(payload.product_id)
        try:
            product = self._insert_product(payload)
            self.db.commit()
            logger.info(f"创建商品成功: product_id={product.product_id}")
            return product
        except Exception as e:
            self.db.rollback()
            logger.error(f"创建商品失败: product_id={payload.product_id}, error={e}")
            raise
        finally:
            self._release_locks(locks)

    def update_product(self, product_id: int, payload: ProductUpdate) -> Optional[Product]:
        """修改商品

        payload.product_id 与路径ID相同：原地覆盖标量字段，返回 None。
        不同：视为改号，新建商品并迁移货架槽位与库存记录，返回新商品。
        """
        if payload.product_id != product_id:
            return self._renumber_product(product_id, payload)

        locks = self._acquire_locks(product_id)
        try:
            product = self.db.get(Product, product_id)
            if product is None:
                raise HTTPException(status_code=404, detail="商品不存在")

            self._check_shelf_payload(payload)
            self._check_shelf_id(payload.shelf_id)

            for key, value in payload.scalar_fields().items():
                setattr(product, key, value)

            self.db.commit()
            logger.info(f"修改商品成功: product_id={product_id}")
            return None
        except Exception as e:
            self.db.rollback()
            logger.error(f"修改商品失败: product_id={product_id}, error={e}")
            raise
        finally:
            self._release_locks(locks)

    def _renumber_product(self, old_id: int, payload: ProductUpdate) -> Product:
        new_id = payload.product_id
        locks = self._acquire_locks(old_id, new_id)
        try:
            old_product = self.db.get(Product, old_id)
            if old_product is None:
                raise HTTPException(status_code=404, detail="商品不存在")

            product = self._insert_product(payload)

            shelf_count = self._replace_shelf_references(old_id, new_id)
            stock_count = self._move_stock(old_id, new_id)

            self.db.delete(old_product)
            self.db.commit()
            logger.info(
                f"商品改号成功: {old_id} -> {new_id}, "
                f"货架槽位={shelf_count}, 库存记录={stock_count}"
            )
            return product
        except Exception as e:
            self.db.rollback()
            logger.error(f"商品改号失败: {old_id} -> {new_id}, error={e}")
            raise
        finally:
            self._release_locks(locks)

    def delete_product(self, product_id: int) -> None:
        """删除商品，同时删除库存记录并清空货架槽位"""
        locks = self._acquire_locks(product_id)
        try:
            product = self.db.get(Product, product_id)
            if product is None:
                raise HTTPException(status_code=404, detail="商品不存在")

            stock_count = self._delete_stock(product_id)
            shelf_count = self._clear_shelf_references(product_id)

            self.db.delete(product)
            self.db.commit()
            logger.info(
                f"删除商品成功: product_id={product_id}, "
                f"货架槽位={shelf_count}, 库存记录={stock_count}"
            )
        except Exception as e:
            self.db.rollback()
            logger.error(f"删除商品失败: product_id={product_id}, error={e}")
            raise
        finally:
            self._release_locks(locks)

    # ==================== 内部方法 ====================

    def product_exists(self, product_id: int) -> bool:
        return self.db.execute(
            select(Product.product_id).where(Product.product_id == product_id)
        ).first() is not None

    def shelf_exists(self, shelf_id: int) -> bool:
        return self.db.execute(
            select(Shelf.shelf_id).where(Shelf.shelf_id == shelf_id)
        ).first() is not None

    def _check_shelf_payload(self, payload: ProductCreate) -> None:
        # 货架槽位只能由货架一侧维护
        if payload.shelf is not None:
            raise HTTPException(status_code=400, detail="shelf 反向引用必须为空")

    def _check_shelf_id(self, shelf_id: Optional[int]) -> None:
        if shelf_id is not None and not self.shelf_exists(shelf_id):
            raise HTTPException(status_code=400, detail="所选货架不存在")

    def _insert_product(self, payload: ProductCreate) -> Product:
        """校验并写入新商品（只 flush，不提交）"""
        self._check_shelf_payload(payload)

        if self.product_exists(payload.product_id):
            raise HTTPException(status_code=400, detail="相同ID的商品已存在")

        self._check_shelf_id(payload.shelf_id)

        product = Product(product_id=payload.product_id, **payload.scalar_fields())
        self.db.add(product)
        self.db.flush()
        return product

    def _replace_shelf_references(self, old_id: int, new_id: int) -> int:
        result = self.db.execute(
            update(ShelfSlot)
            .where(ShelfSlot.product_id == old_id)
            .values(product_id=new_id)
            .execution_options(synchronize_session="fetch")
        )
        return result.rowcount

    def _clear_shelf_references(self, product_id: int) -> int:
        result = self.db.execute(
            update(ShelfSlot)
            .where(ShelfSlot.product_id == product_id)
            .values(product_id=None)
            .execution_options(synchronize_session="fetch")
        )
        return result.rowcount

    def _move_stock(self, old_id: int, new_id: int) -> int:
        result = self.db.execute(
            update(Stock)
            .where(Stock.product_id == old_id)
            .values(product_id=new_id)
            .execution_options(synchronize_session="fetch")
        )
        return result.rowcount

    def _delete_stock(self, product_id: int) -> int:
        result = self.db.execute(
            delete(Stock)
            .where(Stock.product_id == product_id)
            .execution_options(synchronize_session="fetch")
        )
        return result.rowcount

    # ==================== 分布式锁 ====================

    def _acquire_locks(self, *product_ids: int) -> list:
        """按ID升序获取商品锁，避免交叉等待"""
        locks = []
        if not self.rlock:
            return locks

        for product_id in sorted(set(product_ids)):
            lock = self.rlock.lock(f"lock:product:{product_id}", settings.LOCK_TTL_MS)
            if not lock:
                self._release_locks(locks)
                raise HTTPException(status_code=429, detail="商品操作冲突，请稍后重试")
            locks.append(lock)
        return locks

    def _release_locks(self, locks: list) -> None:
        if self.rlock:
            for lock in locks:
                self.rlock.unlock(lock)
