"""
SQL Data Gateway

A thin data-mapper over SQLAlchemy Core: model classes map to snake_case
tables, reads come back as typed collections, and writes stamp the
created / updated / deleted lifecycle columns (soft delete by default).
"""

from .collection import ModelCollection
from .config import DatabaseConfig
from .core import DataGateway, Join, JoinType, create_gateway
from .exceptions import (
    ColumnMismatchError,
    ConnectionError,
    DataGatewayError,
    InvalidPredicateError,
    LifecycleError,
    UnsafeDeleteError,
    ValidationError,
)
from .models import EntityModel, LifecycleState, ModelAbstraction
from .naming import model_to_table

__version__ = "1.0.0"
__all__ = [
    # Configuration
    "DatabaseConfig",

    # Exceptions
    "ColumnMismatchError",
    "ConnectionError",
    "DataGatewayError",
    "InvalidPredicateError",
    "LifecycleError",
    "UnsafeDeleteError",
    "ValidationError",

    # Models
    "EntityModel",
    "LifecycleState",
    "ModelAbstraction",
    "ModelCollection",

    # Gateway
    "DataGateway",
    "create_gateway",
    "Join",
    "JoinType",
    "model_to_table",
]
