from typing import Any

from pydantic import ValidationError

from app.schemas.product import FieldError, ProductInput


def _field_name(loc: tuple) -> str:
    return ".".join(str(part) for part in loc) or "body"


def validate_product_input(payload: Any) -> tuple[ProductInput | None, list[FieldError]]:
    """Validate a create/update body.

    Returns the parsed input and an empty list, or ``None`` and one
    FieldError per failing field. Never raises for bad input.
    """
    if not isinstance(payload, dict):
        return None, [FieldError(field="body", message="Request body must be a JSON object")]

    try:
        return ProductInput.model_validate(payload), []
    except ValidationError as e:
        return None, [
            FieldError(field=_field_name(err["loc"]), message=err["msg"])
            for err in e.errors()
        ]
