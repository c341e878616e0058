"""
Base Model Components and Mixins

This module provides the model contract the gateway consumes and a stock
pydantic implementation of it.

## Components

- DateTimeMixin: Centralized datetime validation for every datetime field
- ModelAbstraction: The capability contract (`extract`, id and lifecycle accessors)
- EntityModel: Pydantic base implementing ModelAbstraction

## Lifecycle fields

`id`, `created`, `updated` and `deleted` are frozen: assigning them on an
instance raises a pydantic ValidationError. They are accepted at construction
(hydrating a row) and otherwise only change through the `set_*` mutators that
the gateway drives via `models.lifecycle.stamp`.

## Extra data

Keys handed to the constructor that are not model fields (for example
columns selected through a join) are collected into `extra_data`. That field
is never part of `extract()` and is never written back.
"""

import logging
from datetime import datetime
from typing import Any, Dict, Mapping, Optional, Protocol, get_args, get_origin, runtime_checkable

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ..utils.timezone import ensure_utc, parse_iso
from .lifecycle import LifecycleState, state_of

logger = logging.getLogger(__name__)


class DateTimeMixin(BaseModel):
    """
    Mixin providing consistent datetime validation.

    Features:
    - ISO string parsing with `Z` suffix handling
    - Naive datetimes (as returned by stores without timezone support) are read as UTC
    - Error handling with descriptive messages
    """

    @field_validator('*', mode='before')
    @classmethod
    def validate_datetime_fields(cls, v, info):
        """
        Validate datetime fields consistently across all models.

        This validator applies to all fields and only processes those that are
        datetime types, leaving other fields unchanged.

        Raises:
            ValueError: If datetime format is invalid or type is unsupported
        """
        field = cls.model_fields.get(info.field_name)
        field_annotation = field.annotation if field is not None else None

        if field_annotation is None:
            return v

        # Handle Optional[datetime] and Union types
        origin = get_origin(field_annotation)
        if origin is not None:
            args = get_args(field_annotation)
            if not any(arg is datetime for arg in args if arg is not type(None)):
                return v
        elif field_annotation is not datetime:
            return v

        if v is None:
            return v

        if isinstance(v, str):
            try:
                v = parse_iso(v)
            except ValueError as e:
                raise ValueError(f"Invalid datetime format: {v}. Expected ISO format.") from e

        if isinstance(v, datetime):
            return ensure_utc(v)

        raise ValueError(f"Invalid datetime type: {type(v)}. Expected datetime object or ISO string.")


@runtime_checkable
class ModelAbstraction(Protocol):
    """Capability contract every persistable model exposes to the gateway."""

    def extract(self) -> Mapping[str, Any]:
        ...

    def get_id(self) -> Optional[int]:
        ...

    def set_id(self, value: Optional[int]) -> None:
        ...

    def get_created(self) -> Optional[datetime]:
        ...

    def set_created(self, value: datetime) -> None:
        ...

    def get_updated(self) -> Optional[datetime]:
        ...

    def set_updated(self, value: datetime) -> None:
        ...

    def get_deleted(self) -> Optional[datetime]:
        ...

    def set_deleted(self, value: datetime) -> None:
        ...


class EntityModel(DateTimeMixin, BaseModel):
    """
    Pydantic base for domain entities persisted through the gateway.

    Subclasses declare their domain fields; the class name decides the table
    (`UserAccount` -> `user_account`).
    """

    id: Optional[int] = Field(None, frozen=True, description="Store-generated identifier")
    created: Optional[datetime] = Field(None, frozen=True, description="Set at first insert")
    updated: Optional[datetime] = Field(None, frozen=True, description="Set on every later persist")
    deleted: Optional[datetime] = Field(None, frozen=True, description="Set by soft delete")
    extra_data: Dict[str, Any] = Field(default_factory=dict, exclude=True, description="Non-persisted values")

    model_config = ConfigDict(
        validate_assignment=True
    )

    @model_validator(mode='before')
    @classmethod
    def collect_extra_data(cls, data: Any) -> Any:
        """Move keys that are not model fields into extra_data."""
        if not isinstance(data, Mapping):
            return data

        fields = cls.model_fields
        known = {k: v for k, v in data.items() if k in fields}
        extras = {k: v for k, v in data.items() if k not in fields}
        if extras:
            known['extra_data'] = {**dict(known.get('extra_data') or {}), **extras}
        return known

    @property
    def lifecycle_state(self) -> LifecycleState:
        return state_of(self)

    def extract(self) -> Dict[str, Any]:
        """Persistable field values keyed by column name."""
        return self.model_dump(exclude={'extra_data'})

    def _assign_frozen(self, name: str, value: Any) -> None:
        # frozen fields reject __setattr__; lifecycle transitions write here
        self.__dict__[name] = value
        self.__pydantic_fields_set__.add(name)

    def get_id(self) -> Optional[int]:
        return self.id

    def set_id(self, value: Optional[int]) -> None:
        self._assign_frozen('id', value)

    def get_created(self) -> Optional[datetime]:
        return self.created

    def set_created(self, value: datetime) -> None:
        self._assign_frozen('created', value)

    def get_updated(self) -> Optional[datetime]:
        return self.updated

    def set_updated(self, value: datetime) -> None:
        self._assign_frozen('updated', value)

    def get_deleted(self) -> Optional[datetime]:
        return self.deleted

    def set_deleted(self, value: datetime) -> None:
        self._assign_frozen('deleted', value)
