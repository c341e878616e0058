# Base exception
from .base import DataGatewayError

# Domain-specific exceptions
from .domain_exceptions import (
    ValidationError,
    InvalidPredicateError,
    ColumnMismatchError,
    LifecycleError,
    UnsafeDeleteError,
    ConnectionError,
)

__all__ = [
    # Base exception
    "DataGatewayError",

    # Domain exceptions (alphabetically ordered)
    "ColumnMismatchError",
    "ConnectionError",
    "InvalidPredicateError",
    "LifecycleError",
    "UnsafeDeleteError",
    "ValidationError",
]
