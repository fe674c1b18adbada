from datetime import datetime, timezone
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ProductInput(BaseModel):
    """Body of create and update requests. Unknown keys (id, createdAt) are ignored."""

    name: str = Field(max_length=200)
    description: str = Field(default="", max_length=1000)
    price: Decimal = Field(ge=0, max_digits=18, decimal_places=2)
    category: str = Field(max_length=100)
    # Matches the 32-bit Integer column
    stock: int = Field(ge=0, le=2**31 - 1)

    @field_validator("name", "category")
    @classmethod
    def not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be blank")
        return value

    @field_validator("description", mode="before")
    @classmethod
    def none_as_empty(cls, value):
        return "" if value is None else value


class FieldError(BaseModel):
    field: str
    message: str


class ProductResponse(CamelModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: str
    price: float
    category: str
    stock: int
    created_at: datetime

    @field_validator("description", mode="before")
    @classmethod
    def none_as_empty(cls, value):
        return "" if value is None else value

    @field_validator("created_at")
    @classmethod
    def as_utc(cls, value: datetime) -> datetime:
        # SQLite hands back naive datetimes; stored values are always UTC
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)


class PagedProducts(CamelModel):
    data: list[ProductResponse]
    total_count: int
    page_number: int
    page_size: int
    total_pages: int
    has_next_page: bool
    has_previous_page: bool
