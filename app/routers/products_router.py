"""商品管理 API 路由"""

from fastapi import APIRouter, Depends, HTTPException, Query, Path, Request, Response, status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session
from typing import List, Optional
import logging

from app.core.dependencies import get_db, get_redlock
from app.core.security import CurrentUser, get_current_user, require_manager
from app.models.product import Category
from app.services.product_service import ProductService
from app.schemas.product import (
    MAX_ID,
    ProductCreate,
    ProductUpdate,
    ProductResponse,
    PRequest,
)

logger = logging.getLogger(__name__)
router = APIRouter(
    prefix="/products",
    tags=["商品管理"],
    responses={
        400: {"description": "请求参数错误"},
        401: {"description": "未认证"},
        403: {"description": "权限不足"},
        404: {"description": "资源未找到"},
        422: {"description": "请求验证失败"},
        429: {"description": "操作冲突"},
        500: {"description": "服务器内部错误"}
    }
)


def _created(request: Request, product) -> JSONResponse:
    """201 响应，Location 指向商品详情"""
    body = ProductResponse.model_validate(product)
    location = request.url_for("get_product", product_id=body.product_id)
    return JSONResponse(
        status_code=status.HTTP_201_CREATED,
        content=jsonable_encoder(body),
        headers={"Location": str(location)},
    )


@router.get(
    "",
    response_model=List[PRequest],
    summary="商品列表",
    description="""查询全部商品及其最新库存，可按分类筛选。

    没有库存记录的商品返回当天的零库存。
    """
)
async def list_products(
    category: Optional[Category] = Query(
        None,
        description="商品分类"
    ),
    db: Session = Depends(get_db),
    rlock = Depends(get_redlock),
    user: CurrentUser = Depends(get_current_user)
):
    """查询商品列表（需要登录）"""
    try:
        service = ProductService(db, rlock)
        return service.list_products(category)
    except HTTPException:
        # 透传 HTTPException
        raise
    except Exception as e:
        logger.error(f"查询商品列表失败: {str(e)}")
        # 未知异常统一抛 500
        raise HTTPException(status_code=500, detail=str(e))


@router.get(
    "/{product_id}",
    response_model=PRequest,
    summary="商品详情",
    responses={
        404: {
            "description": "商品不存在",
            "content": {
                "application/json": {
                    "example": {
                        "success": False,
                        "message": "商品不存在"
                    }
                }
            }
        }
    }
)
async def get_product(
    product_id: int = Path(
        ...,
        ge=0,
        le=MAX_ID,
        description="商品ID"
    ),
    db: Session = Depends(get_db),
    rlock = Depends(get_redlock)
):
    """查询单个商品及其最新库存"""
    try:
        service = ProductService(db, rlock)
        return service.get_product(product_id)
    except HTTPException:
        # 透传 HTTPException
        raise
    except Exception as e:
        logger.error(f"查询商品失败: {str(e)}")
        # 未知异常统一抛 500
        raise HTTPException(status_code=500, detail=str(e))


@router.post(
    "",
    response_model=ProductResponse,
    status_code=status.HTTP_201_CREATED,
    summary="创建商品",
    description="""创建商品，商品ID由调用方指定。

    **校验：**
    - shelf 反向引用必须为空
    - 商品ID不能重复
    - shelf_id 非空时货架必须存在
    """
)
async def create_product(
    request: Request,
    payload: ProductCreate,
    db: Session = Depends(get_db),
    rlock = Depends(get_redlock),
    user: CurrentUser = Depends(require_manager)
):
    """创建商品（仅限 Manager）"""
    try:
        service = ProductService(db, rlock)
        product = service.create_product(payload)
        return _created(request, product)
    except HTTPException:
        # 透传 HTTPException
        raise
    except Exception as e:
        logger.error(f"创建商品失败: {str(e)}")
        # 未知异常统一抛 500
        raise HTTPException(status_code=500, detail=str(e))


@router.patch(
    "/{product_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="修改商品",
    description="""修改商品信息。

    - 请求体中的 product_id 与路径相同：覆盖商品字段，返回 204
    - 不同：商品改号，货架槽位与库存记录随之迁移，返回 201
    """,
    responses={
        201: {"description": "商品改号成功", "model": ProductResponse}
    }
)
async def update_product(
    request: Request,
    payload: ProductUpdate,
    product_id: int = Path(
        ...,
        ge=0,
        le=MAX_ID,
        description="商品ID"
    ),
    db: Session = Depends(get_db),
    rlock = Depends(get_redlock),
    user: CurrentUser = Depends(require_manager)
):
    """修改商品或商品改号（仅限 Manager）"""
    try:
        service = ProductService(db, rlock)
        product = service.update_product(product_id, payload)
        if product is not None:
            return _created(request, product)
        return Response(status_code=status.HTTP_204_NO_CONTENT)
    except HTTPException:
        # 透传 HTTPException
        raise
    except Exception as e:
        logger.error(f"修改商品失败: {str(e)}")
        # 未知异常统一抛 500
        raise HTTPException(status_code=500, detail=str(e))


@router.delete(
    "/{product_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="删除商品",
    description="""删除商品，同时删除其库存记录并清空引用它的货架槽位。"""
)
async def delete_product(
    product_id: int = Path(
        ...,
        ge=0,
        le=MAX_ID,
        description="商品ID"
    ),
    db: Session = Depends(get_db),
    rlock = Depends(get_redlock),
    user: CurrentUser = Depends(require_manager)
):
    """删除商品（仅限 Manager）"""
    try:
        service = ProductService(db, rlock)
        service.delete_product(product_id)
        return Response(status_code=status.HTTP_204_NO_CONTENT)
    except HTTPException:
        # 透传 HTTPException
        raise
    except Exception as e:
        logger.error(f"删除商品失败: {str(e)}")
        # 未知异常统一抛 500
        raise HTTPException(status_code=500, detail=str(e))
