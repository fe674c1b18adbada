import logging
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager

from app.config import Config
from app.db.database import db
from app.db.seed import seed_database
from app.routers import health, products
from app.exceptions import (
    AppException,
    app_exception_handler,
    generic_exception_handler,
    request_validation_exception_handler,
)

# Configure logging
logging.basicConfig(
    level=Config.LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    await db.connect()
    await db.create_tables()
    if Config.SEED_ON_STARTUP:
        await seed_database(db.session_factory)
    yield
    await db.disconnect()


app = FastAPI(
    title="Product Catalog API",
    version="1.0.0",
    description="Create, browse, update and delete catalog products",
    lifespan=lifespan
)

# Register exception handlers
app.add_exception_handler(AppException, app_exception_handler)
app.add_exception_handler(RequestValidationError, request_validation_exception_handler)
app.add_exception_handler(Exception, generic_exception_handler)

app.add_middleware(
    CORSMiddleware,
    allow_origins=Config.CORS_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["Location"],
)

# Include routers
app.include_router(health.router)
app.include_router(products.router, prefix=Config.API_PREFIX)
