"""
Persistence Lifecycle

A model moves through three states, derived from its id and deletion stamp:

    NEW           id is None
    PERSISTED     id is set, deleted is None
    SOFT_DELETED  id is set, deleted is set

The gateway is the only writer of lifecycle stamps. Each stamp is legal from
exactly one state:

    created  NEW        (first insert; created must still be empty)
    updated  PERSISTED  (every later persist that is not a soft delete)
    deleted  PERSISTED  (soft delete; later persists commit this stamp)
"""

import logging
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Tuple

from ..exceptions import LifecycleError

logger = logging.getLogger(__name__)


class LifecycleState(str, Enum):
    """Persistence state of a model instance."""
    NEW = "new"
    PERSISTED = "persisted"
    SOFT_DELETED = "soft_deleted"


LIFECYCLE_FIELDS: Tuple[str, ...] = ('created', 'updated', 'deleted')

STAMP_SOURCE_STATE: Dict[str, LifecycleState] = {
    'created': LifecycleState.NEW,
    'updated': LifecycleState.PERSISTED,
    'deleted': LifecycleState.PERSISTED,
}


def state_of(model: Any) -> LifecycleState:
    """Derive the lifecycle state of a model from its id and deletion stamp."""
    if model.get_id() is None:
        return LifecycleState.NEW
    if model.get_deleted() is None:
        return LifecycleState.PERSISTED
    return LifecycleState.SOFT_DELETED


def check_transition(model: Any, field: str) -> None:
    """Raise unless `field` may be stamped on the model in its current state.

    Raises:
        ValueError: If field is not a lifecycle field
        LifecycleError: If the model is not in the state the stamp requires
    """
    if field not in STAMP_SOURCE_STATE:
        raise ValueError(f"Unknown lifecycle field: {field}")

    current = state_of(model)
    expected = STAMP_SOURCE_STATE[field]
    model_name = type(model).__name__

    if current is not expected:
        raise LifecycleError(
            f"Cannot stamp '{field}' on a {current.value} model",
            model_name=model_name,
            state=current.value,
        )

    if field == 'created' and model.get_created() is not None:
        raise LifecycleError(
            "Cannot stamp 'created' twice",
            model_name=model_name,
            state=current.value,
        )


def stamp(model: Any, field: str, now: datetime) -> None:
    """Apply a lifecycle stamp, refusing transitions from the wrong state.

    Args:
        model: Model implementing ModelAbstraction
        field: One of 'created', 'updated', 'deleted'
        now: Timestamp to record
    """
    check_transition(model, field)
    getattr(model, f"set_{field}")(now)
    logger.debug(f"Stamped {field} on {type(model).__name__} at {now.isoformat()}")
