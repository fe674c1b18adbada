"""Page/size normalization shared by the products router and ProductService."""
import math
from typing import Any, Sequence

from app.config import Config
from app.schemas.product import PagedProducts, ProductResponse


def parse_int(value: Any) -> int | None:
    """Best-effort int conversion; anything unparsable counts as absent."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    try:
        return int(str(value).strip())
    except ValueError:
        return None


def normalize_page(page: int | None) -> int:
    if page is None or page < 1:
        return 1
    return page


def normalize_page_size(page_size: int | None) -> int:
    if page_size is None or page_size < 1 or page_size > Config.MAX_PAGE_SIZE:
        return Config.DEFAULT_PAGE_SIZE
    return page_size


def total_pages(total_count: int, page_size: int) -> int:
    return math.ceil(total_count / page_size)


def build_page(items: Sequence[Any], total_count: int, page: int, page_size: int) -> PagedProducts:
    pages = total_pages(total_count, page_size)
    return PagedProducts(
        data=[ProductResponse.model_validate(item) for item in items],
        total_count=total_count,
        page_number=page,
        page_size=page_size,
        total_pages=pages,
        has_next_page=page < pages,
        has_previous_page=page > 1,
    )
