"""
Domain-Specific Exceptions for the Data Gateway

All exceptions raised by the gateway itself extend DataGatewayError. Failures
raised by the database while executing a statement are NOT wrapped here; they
reach the caller as the original SQLAlchemy / DB-API exception.

Organized by category:
1. Contract Violations (raised before any SQL reaches the store)
2. Lifecycle Errors
3. Infrastructure Errors
"""

from typing import Any, Dict, List, Optional

from .base import DataGatewayError


# =============================================================================
# Contract Violations
# =============================================================================

class ValidationError(DataGatewayError):
    """Raised when input handed to the gateway breaks its contract.

    Used for:
    - Pydantic model validation failures while hydrating rows
    - Malformed join descriptors and clashing join column labels
    - Columns a caller's own Table does not have

    Model names that are not PascalCase are a programming error and raise
    ValueError from naming.model_to_table instead.
    """

    def __init__(self, message: str, errors: Optional[Dict[str, Any]] = None, original_error: Optional[Exception] = None):
        """Initialize validation error.

        Args:
            message: Human-readable error message
            errors: Dictionary of field-level validation errors
            original_error: The original exception that caused this error
        """
        self.errors = errors or {}
        context = {}
        if self.errors:
            context['validation_errors'] = self.errors
        super().__init__(message, original_error=original_error, context=context)


class InvalidPredicateError(ValidationError):
    """Raised when a predicate is not a SQLAlchemy column expression."""

    def __init__(self, predicate: Any, position: Optional[int] = None):
        self.predicate = predicate
        self.position = position
        message = f"Predicate must be a SQLAlchemy column expression, got {type(predicate).__name__}"
        errors = {'predicate': repr(predicate)}
        if position is not None:
            errors['position'] = position
        super().__init__(message, errors)


class ColumnMismatchError(ValidationError):
    """Raised when extracted column and value counts disagree.

    Always raised before a statement is built, so nothing reaches the store.
    """

    def __init__(self, table_name: str, columns: List[str], values: List[Any]):
        self.table_name = table_name
        self.columns = columns
        self.values = values
        message = f"Column count and value count don't match for table '{table_name}'"
        super().__init__(message, {
            'table_name': table_name,
            'column_count': len(columns),
            'value_count': len(values),
        })


# =============================================================================
# Lifecycle Errors
# =============================================================================

class LifecycleError(DataGatewayError):
    """Raised when a lifecycle stamp is applied in the wrong state.

    Used for:
    - Stamping `created` on a model that already has an id or a created time
    - Soft-deleting a model that was never inserted
    - Stamping `updated` on a soft-deleted model
    """

    def __init__(self, message: str, model_name: Optional[str] = None, state: Optional[str] = None):
        self.model_name = model_name
        self.state = state
        context = {}
        if model_name:
            context['model'] = model_name
        if state:
            context['state'] = state
        super().__init__(message, context=context)


class UnsafeDeleteError(DataGatewayError):
    """Raised when a hard delete would target every row of a table."""

    def __init__(self, table_name: str):
        self.table_name = table_name
        message = (
            f"Refusing to hard delete from '{table_name}' without predicates; "
            "pass allow_all=True to delete every row"
        )
        super().__init__(message, context={'table_name': table_name})


# =============================================================================
# Infrastructure Errors
# =============================================================================

class ConnectionError(DataGatewayError):
    """Raised when an engine cannot be created from configuration.

    Used for:
    - Malformed database URLs
    - Missing DB-API drivers
    """

    def __init__(self, message: str, original_error: Optional[Exception] = None, context: Optional[Dict[str, Any]] = None):
        """Initialize connection error.

        Args:
            message: Human-readable error message
            original_error: The original exception that caused this error
            context: Additional context information (e.g., database URL)
        """
        super().__init__(message, original_error, context)
