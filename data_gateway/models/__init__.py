"""
Model layer for the data gateway.

- ModelAbstraction: the contract the gateway consumes
- EntityModel: pydantic implementation of that contract
- LifecycleState: NEW / PERSISTED / SOFT_DELETED
"""

from .base import DateTimeMixin, EntityModel, ModelAbstraction
from .lifecycle import LIFECYCLE_FIELDS, LifecycleState, check_transition, stamp, state_of

__all__ = [
    # Contract and base model
    "ModelAbstraction",
    "EntityModel",
    "DateTimeMixin",

    # Lifecycle
    "LifecycleState",
    "LIFECYCLE_FIELDS",
    "check_transition",
    "stamp",
    "state_of",
]
