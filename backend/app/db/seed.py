import asyncio
import logging
from datetime import datetime, timedelta, timezone
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.db.database import db
from app.models.product import Product

logger = logging.getLogger(__name__)


# Sample products: (name, description, price, category, stock, days ago)
PRODUCTS_DATA = [
    ("iPhone 15 Pro", "Latest Apple iPhone with advanced camera system and A17 Pro chip",
     Decimal("999.99"), "Electronics", 25, 30),
    ("Samsung Galaxy S24", "Flagship Android smartphone with AI features",
     Decimal("849.99"), "Electronics", 18, 25),
    ("Nike Air Max 270", "Comfortable running shoes with Max Air cushioning",
     Decimal("129.99"), "Sports", 45, 20),
    ("The Great Gatsby", "Classic American novel by F. Scott Fitzgerald",
     Decimal("12.99"), "Books", 100, 15),
    ("Levi's 501 Jeans", "Classic straight-fit denim jeans",
     Decimal("79.99"), "Clothing", 30, 10),
    ("KitchenAid Stand Mixer", "Professional-grade stand mixer for baking",
     Decimal("349.99"), "Home", 12, 5),
    ('MacBook Pro 14"', "Apple laptop with M3 chip for professionals",
     Decimal("1999.99"), "Electronics", 8, 3),
    ("Adidas Ultraboost 22", "High-performance running shoes with Boost midsole",
     Decimal("179.99"), "Sports", 22, 2),
    ("Harry Potter Collection", "Complete set of Harry Potter books",
     Decimal("89.99"), "Books", 50, 1),
    ("Cotton T-Shirt", "Basic cotton t-shirt in various colors",
     Decimal("19.99"), "Clothing", 75, 0),
]


async def seed_database(session_factory: async_sessionmaker[AsyncSession]) -> int:
    """Insert the sample catalog if the products table is empty.

    Safe to run repeatedly. Returns the number of products inserted.
    """
    async with session_factory() as session:
        async with session.begin():
            result = await session.execute(select(Product.id).limit(1))
            if result.scalar() is not None:
                logger.info("Database already seeded")
                return 0

            now = datetime.now(timezone.utc)
            for name, description, price, category, stock, days_ago in PRODUCTS_DATA:
                session.add(Product(
                    name=name,
                    description=description,
                    price=price,
                    category=category,
                    stock=stock,
                    created_at=now - timedelta(days=days_ago),
                ))

    logger.info(f"Seeded {len(PRODUCTS_DATA)} products")
    return len(PRODUCTS_DATA)


async def main():
    await db.connect()
    try:
        await db.create_tables()
        await seed_database(db.session_factory)
    finally:
        await db.disconnect()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    asyncio.run(main())
