import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Sequence

from sqlalchemy import delete, func, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.errors import ErrorType
from app.exceptions import AppException
from app.models.product import Product
from app.schemas.product import ProductInput
from app.services.pagination import normalize_page, normalize_page_size

logger = logging.getLogger(__name__)


class ProductService:
    """Catalog store: every read and write of the products table goes through here.

    Each method runs in its own transaction on the bound session, so a
    mutation is either fully visible to later reads or not at all.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    @asynccontextmanager
    async def _transaction(self, action: str):
        try:
            async with self.session.begin():
                yield
        except (SQLAlchemyError, OverflowError) as e:
            logger.error(f"Database error while trying to {action}: {e}")
            raise AppException(ErrorType.PERSISTENCE_FAILURE, f"Failed to {action}") from e

    async def list_products(
        self,
        page: int | None,
        page_size: int | None,
        search: str | None = None,
        category: str | None = None,
    ) -> tuple[Sequence[Product], int]:
        """Return one page of products, newest first, plus the unpaginated match count."""
        page = normalize_page(page)
        page_size = normalize_page_size(page_size)

        conditions = []
        if search:
            conditions.append(or_(
                Product.name.contains(search, autoescape=True),
                Product.description.contains(search, autoescape=True),
            ))
        if category:
            conditions.append(Product.category == category)

        offset = (page - 1) * page_size
        count_stmt = select(func.count()).select_from(Product).where(*conditions)
        page_stmt = (
            select(Product)
            .where(*conditions)
            .order_by(Product.created_at.desc(), Product.id.desc())
            .offset(offset)
            .limit(page_size)
        )

        async with self._transaction("list products"):
            total_count = (await self.session.execute(count_stmt)).scalar_one()
            # Past the last match; huge offsets never reach the driver
            if offset >= total_count:
                items = []
            else:
                items = (await self.session.execute(page_stmt)).scalars().all()

        return items, total_count

    async def get_product(self, product_id: int) -> Product | None:
        async with self._transaction("load product"):
            return await self.session.get(Product, product_id)

    async def create_product(self, data: ProductInput) -> Product:
        product = Product(
            name=data.name,
            description=data.description,
            price=data.price,
            category=data.category,
            stock=data.stock,
            created_at=datetime.now(timezone.utc),
        )

        async with self._transaction("create product"):
            self.session.add(product)
            await self.session.flush()

        logger.info(f"Created product {product.id} ({product.name})")
        return product

    async def update_product(self, product_id: int, data: ProductInput) -> Product | None:
        """Replace all mutable fields of a product under a row lock."""
        stmt = (
            select(Product)
            .where(Product.id == product_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )

        async with self._transaction("update product"):
            product = (await self.session.execute(stmt)).scalar_one_or_none()
            if product is None:
                return None

            product.name = data.name
            product.description = data.description
            product.price = data.price
            product.category = data.category
            product.stock = data.stock

        logger.info(f"Updated product {product_id}")
        return product

    async def delete_product(self, product_id: int) -> bool:
        async with self._transaction("delete product"):
            result = await self.session.execute(
                delete(Product).where(Product.id == product_id)
            )

        deleted = result.rowcount > 0
        if deleted:
            logger.info(f"Deleted product {product_id}")
        return deleted
