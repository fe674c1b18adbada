import logging
from typing import Any

from fastapi import APIRouter, Body, Depends, Query, Request, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.database import get_session
from app.errors import ErrorType
from app.exceptions import AppException
from app.schemas.product import PagedProducts, ProductInput, ProductResponse
from app.services.pagination import build_page, normalize_page, normalize_page_size, parse_int
from app.services.product_service import ProductService
from app.services.validation import validate_product_input

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/products", tags=["products"])


def get_product_service(session: AsyncSession = Depends(get_session)) -> ProductService:
    return ProductService(session)


def _require_valid(payload: Any) -> ProductInput:
    data, errors = validate_product_input(payload)
    if errors:
        logger.info(f"Rejected product payload: {[e.field for e in errors]}")
        raise AppException(
            ErrorType.VALIDATION_ERROR,
            "Validation failed",
            errors=[e.model_dump() for e in errors],
        )
    return data


@router.get("", response_model=PagedProducts)
async def list_products(
    page: str | None = None,
    limit: str | None = None,
    page_size: str | None = Query(None, alias="pageSize"),
    search: str | None = None,
    category: str | None = None,
    service: ProductService = Depends(get_product_service),
):
    # Bad paging input is normalized, never rejected
    page_number = normalize_page(parse_int(page))
    size = normalize_page_size(parse_int(limit if limit is not None else page_size))

    items, total_count = await service.list_products(page_number, size, search, category)
    return build_page(items, total_count, page_number, size)


@router.get("/{product_id}", response_model=ProductResponse)
async def get_product(product_id: int, service: ProductService = Depends(get_product_service)):
    product = await service.get_product(product_id)
    if product is None:
        return Response(status_code=status.HTTP_404_NOT_FOUND)
    return product


@router.post("", response_model=ProductResponse, status_code=status.HTTP_201_CREATED)
async def create_product(
    request: Request,
    response: Response,
    payload: Any = Body(None),
    service: ProductService = Depends(get_product_service),
):
    data = _require_valid(payload)
    product = await service.create_product(data)
    response.headers["Location"] = str(request.url_for("get_product", product_id=product.id))
    return product


@router.put("/{product_id}", response_model=ProductResponse)
async def update_product(
    product_id: int,
    payload: Any = Body(None),
    service: ProductService = Depends(get_product_service),
):
    data = _require_valid(payload)
    product = await service.update_product(product_id, data)
    if product is None:
        return Response(status_code=status.HTTP_404_NOT_FOUND)
    return product


@router.delete("/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_product(product_id: int, service: ProductService = Depends(get_product_service)):
    if not await service.delete_product(product_id):
        return Response(status_code=status.HTTP_404_NOT_FOUND)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
