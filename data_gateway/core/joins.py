"""Join descriptors for gateway reads."""

from collections.abc import Mapping, Sequence
from enum import Enum
from typing import Any, Dict, List, Type, Union

from sqlalchemy.sql.expression import ColumnElement

from ..exceptions import InvalidPredicateError, ValidationError


class JoinType(str, Enum):
    """Join kinds the gateway can express."""
    INNER = "inner"
    LEFT = "left"
    FULL = "full"


class Join:
    """Describes one additional table combined into a read.

    Args:
        table: Target model class (or its PascalCase name); the joined table
            name is derived from it exactly like the primary table
        on: Join condition as a SQLAlchemy column expression
        cols: Columns to select from the joined table. A sequence of names,
            or a mapping of result label -> column name
        type: Join kind, chosen by the caller

    Example:
        Join(Profile, on=gateway.column(UserAccount, 'id') == gateway.column(Profile, 'user_id'),
             cols={'profile_bio': 'bio'}, type=JoinType.LEFT)
    """

    def __init__(
        self,
        table: Union[Type, str],
        on: Any,
        cols: Union[Sequence[str], Mapping[str, str]] = (),
        type: Union[JoinType, str] = JoinType.INNER
    ):
        if not isinstance(on, ColumnElement):
            raise InvalidPredicateError(on)

        if isinstance(cols, str) or not isinstance(cols, (Sequence, Mapping)):
            raise ValidationError(
                f"Join columns must be a list or mapping, got {cols.__class__.__name__}",
                {'cols': repr(cols)}
            )

        try:
            join_type = JoinType(type)
        except ValueError as e:
            raise ValidationError(
                f"Unsupported join type: {type!r}",
                {'supported': [t.value for t in JoinType]},
                original_error=e
            ) from e

        self.table = table
        self.on = on
        self.cols = cols
        self.type = join_type

    @property
    def columns(self) -> Dict[str, str]:
        """Selected columns as label -> column name."""
        if isinstance(self.cols, Mapping):
            return dict(self.cols)
        return {name: name for name in self.cols}

    @property
    def column_names(self) -> List[str]:
        return list(dict.fromkeys(self.columns.values()))

    def __repr__(self) -> str:
        target = self.table if isinstance(self.table, str) else self.table.__name__
        return f"Join(table={target!r}, type={self.type.value!r}, cols={self.cols!r})"
