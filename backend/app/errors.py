from enum import Enum


class ErrorType(Enum):
    VALIDATION_ERROR = "validation_error"
    PERSISTENCE_FAILURE = "persistence_failure"
    INTERNAL_ERROR = "internal_error"


# Map error types to HTTP status codes
ERROR_STATUS_MAP = {
    ErrorType.VALIDATION_ERROR: 400,
    ErrorType.PERSISTENCE_FAILURE: 503,
    ErrorType.INTERNAL_ERROR: 500,
}
