"""
Thin SQL Data Gateway

This module maps model-level read/write/delete intents onto SQLAlchemy Core
statements. The gateway itself only:

1. Derives table names from model class names (PascalCase -> snake_case)
2. Stamps lifecycle fields (created / updated / deleted) as part of a write
3. Builds one statement per call and executes it on the bound engine or connection

Statement construction, parameter binding and execution are SQLAlchemy's job.
Failures raised while executing a statement are logged and re-raised
unchanged: there is no retry, translation or rollback orchestration here.

Binding:
- Engine: every call runs in its own `engine.begin()` block and commits on success
- Connection: calls execute on it directly and the caller owns the transaction
"""

import logging
from typing import Any, Callable, Dict, List, Optional, Sequence, Type, TypeVar, Union

import pydantic
import sqlalchemy as sa
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.exc import ArgumentError, NoSuchModuleError, SQLAlchemyError
from sqlalchemy.sql.expression import ColumnElement, TableClause
from sqlalchemy.sql.util import find_tables

from ..collection import ModelCollection
from ..config import DatabaseConfig
from ..exceptions import (
    ColumnMismatchError,
    ConnectionError,
    InvalidPredicateError,
    UnsafeDeleteError,
    ValidationError,
)
from ..models import LIFECYCLE_FIELDS, ModelAbstraction, check_transition, stamp
from ..naming import model_to_table
from ..utils.timezone import Clock, utcnow
from .joins import Join, JoinType

logger = logging.getLogger(__name__)

M = TypeVar('M')

# Never written from extract(): id is store-generated, extra_data is not persisted
# and lifecycle columns are written only by the stamp that applies to the call.
NON_PERSISTED_FIELDS = frozenset({'id', 'extra_data'})


def _bind_values(fields: Dict[str, Any]) -> Dict[str, Any]:
    """Wrap values as literals so each bind takes its SQL type from the Python value."""
    return {column: sa.literal(value) for column, value in fields.items()}


class DataGateway:
    """
    Gateway translating models into SELECT / INSERT / UPDATE / DELETE statements.

    Key principles:
    - One statement per call, no implicit LIMIT, ORDER BY or identity predicate
    - Predicates are SQLAlchemy column expressions, ANDed in the order given
    - Lifecycle stamps reach the model only after the statement succeeds
    """

    def __init__(
        self,
        bind: Union[Engine, Connection],
        table_prefix: str = "",
        clock: Optional[Clock] = None
    ):
        """Initialize the gateway.

        Args:
            bind: Configured SQLAlchemy Engine, or an open Connection
            table_prefix: Optional prefix joined to every derived table name with '_'
            clock: Callable returning the timestamp used for lifecycle stamps
                (defaults to timezone-aware UTC now)
        """
        if not isinstance(bind, (Engine, Connection)):
            raise TypeError(f"bind must be a SQLAlchemy Engine or Connection, got {type(bind).__name__}")

        self.bind = bind
        self.table_prefix = table_prefix
        self.clock = clock or utcnow

    # -------------------------------------------------------------------------
    # Naming helpers
    # -------------------------------------------------------------------------

    def table_name(self, model: Union[Type, str]) -> str:
        """Table name for a model class or PascalCase model name."""
        name = model_to_table(model)
        if self.table_prefix:
            return f"{self.table_prefix}_{name}"
        return name

    def column(self, model: Union[Type, str], name: str) -> sa.ColumnClause:
        """Table-qualified column for building predicates.

        Columns of a caller's own `Table` work as well; the gateway then builds
        the statement on that `Table`.

        Example:
            gateway.get(UserAccount, gateway.column(UserAccount, 'id') == 7)
        """
        return sa.literal_column(f"{self.table_name(model)}.{name}")

    # -------------------------------------------------------------------------
    # Read
    # -------------------------------------------------------------------------

    def get(
        self,
        model_type: Type[M],
        *predicates: ColumnElement,
        joins: Sequence[Join] = ()
    ) -> ModelCollection[M]:
        """
        Read rows of a model's table into a typed collection.

        Args:
            model_type: Model class; its name decides the table
            *predicates: WHERE conditions, ANDed
            joins: Join descriptors, applied in order

        Returns:
            ModelCollection holding one model per row, in store order

        Raises:
            InvalidPredicateError: A predicate is not a column expression
            ValidationError: A join entry is not a Join, join labels clash with each other
                or with the table's columns, or a row does not fit the model
        """
        self._check_model_type(model_type)
        self._check_predicates(predicates)
        for join in joins:
            if not isinstance(join, Join):
                raise ValidationError(
                    f"Join descriptors must be Join instances, got {type(join).__name__}",
                    {'join': repr(join)}
                )

        table_name = self.table_name(model_type)
        clauses = [*predicates, *(join.on for join in joins)]
        base = self._target_table(table_name, clauses)
        from_clause = base
        selected = [sa.literal_column(f"{table_name}.*")]
        labels = self._join_labels(joins)

        for join in joins:
            joined_name = self.table_name(join.table)
            target = self._target_table(joined_name, clauses, join.column_names)
            from_clause = from_clause.join(
                target,
                join.on,
                isouter=join.type is JoinType.LEFT,
                full=join.type is JoinType.FULL,
            )
            selected.extend(target.c[col].label(label) for label, col in join.columns.items())

        query = sa.select(*selected).select_from(from_clause)
        for predicate in predicates:
            query = query.where(predicate)

        keys, rows = self._execute(
            query, "Select", table_name,
            lambda result: (list(result.keys()), result.all())
        )

        # `table.*` expands to columns the statement cannot see; joined labels come last
        own_columns = keys[:len(keys) - len(labels)]
        clashing = sorted(set(own_columns) & set(labels))
        if clashing:
            raise ValidationError(
                f"Join column labels collide with columns of {table_name}: {', '.join(clashing)}",
                {'labels': clashing}
            )

        result_set: ModelCollection[M] = ModelCollection(model_type)
        for row in rows:
            result_set.add(self._hydrate(model_type, dict(zip(keys, row))))

        logger.debug(f"Selected {len(result_set)} row(s) from {table_name}")
        return result_set

    # -------------------------------------------------------------------------
    # Write
    # -------------------------------------------------------------------------

    def persist(self, model: ModelAbstraction, *predicates: ColumnElement) -> Optional[Any]:
        """
        Insert a new model or update an existing one.

        Insert path (model id is None):
            INSERT every extracted field plus `created`; the generated id is
            assigned to the model and returned.

        Update path (model id is set):
            UPDATE the extracted fields filtered by `predicates`. A live model
            also gets `updated`; a soft-deleted model commits its `deleted`
            stamp instead and keeps its previous `updated`. Returns None.

        Args:
            model: Model implementing ModelAbstraction
            *predicates: WHERE conditions for the update path

        Returns:
            Generated identifier on insert, None on update

        Raises:
            ColumnMismatchError: extract() keys and values differ in count
            InvalidPredicateError: A predicate is not a column expression
            LifecycleError: The model's state does not allow this write
        """
        self._check_model(model)
        self._check_predicates(predicates)

        table_name = self.table_name(type(model))
        fields = self._extract_fields(model, table_name)

        if model.get_id() is None:
            return self._insert(model, table_name, fields)

        self._update(model, table_name, fields, predicates)
        return None

    def delete(
        self,
        model: ModelAbstraction,
        *predicates: ColumnElement,
        soft: bool = True,
        allow_all: bool = False
    ) -> None:
        """
        Soft delete (stamp `deleted` and persist) or physically delete rows.

        Args:
            model: Model whose table is targeted
            *predicates: WHERE conditions selecting the row(s)
            soft: Stamp and persist instead of issuing DELETE
            allow_all: Permit a hard delete without predicates

        Raises:
            UnsafeDeleteError: Hard delete without predicates and allow_all is False
            LifecycleError: Soft delete of a model that is not persisted
        """
        self._check_model(model)
        self._check_predicates(predicates)

        if soft:
            self._soft_delete(model, predicates)
            return None

        table_name = self.table_name(type(model))
        if not predicates and not allow_all:
            raise UnsafeDeleteError(table_name)

        query = sa.delete(self._target_table(table_name, predicates))
        for predicate in predicates:
            query = query.where(predicate)

        rowcount = self._execute(query, "Delete", table_name, lambda result: result.rowcount)
        logger.info(f"Deleted {rowcount} row(s) from {table_name}")
        return None

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _insert(self, model: ModelAbstraction, table_name: str, fields: Dict[str, Any]) -> Any:
        check_transition(model, 'created')
        now = self.clock()
        fields['created'] = now

        table = sa.table(table_name, sa.column('id'), *(sa.column(c) for c in fields))
        query = sa.insert(table).values(_bind_values(fields))

        returning = self.bind.dialect.insert_returning
        if returning:
            query = query.returning(table.c.id)

        new_id = self._execute(
            query, "Insert", table_name,
            lambda result: result.scalar_one() if returning else result.lastrowid
        )

        stamp(model, 'created', now)
        model.set_id(new_id)
        logger.info(f"Inserted into {table_name}: id={new_id}")
        return new_id

    def _update(
        self,
        model: ModelAbstraction,
        table_name: str,
        fields: Dict[str, Any],
        predicates: Sequence[ColumnElement]
    ) -> None:
        deleted = model.get_deleted()
        if deleted is None:
            check_transition(model, 'updated')
            now = self.clock()
            fields['updated'] = now
        else:
            fields['deleted'] = deleted

        if not predicates:
            logger.warning(f"Update on {table_name} without predicates targets every row")

        table = self._target_table(table_name, predicates, fields)
        query = sa.update(table).values(_bind_values(fields))
        for predicate in predicates:
            query = query.where(predicate)

        rowcount = self._execute(query, "Update", table_name, lambda result: result.rowcount)

        if deleted is None:
            stamp(model, 'updated', now)
        logger.info(f"Updated {rowcount} row(s) in {table_name}: id={model.get_id()}")

    def _soft_delete(self, model: ModelAbstraction, predicates: Sequence[ColumnElement]) -> None:
        stamp(model, 'deleted', self.clock())
        try:
            self.persist(model, *predicates)
        except Exception:
            # the row was not marked, so neither is the model
            model.set_deleted(None)
            raise

    @staticmethod
    def _target_table(
        table_name: str,
        clauses: Sequence[ColumnElement],
        columns: Sequence[str] = ()
    ) -> TableClause:
        """Table object a statement on `table_name` is built against.

        A predicate written against the caller's own `Table` must share the
        statement's FROM object, otherwise SQLAlchemy renders the table twice.
        The first such table found in `clauses` is reused; otherwise a bare
        table clause carrying `columns` is built.
        """
        for clause in clauses:
            for table in find_tables(clause, check_columns=True):
                if not isinstance(table, TableClause) or table.name != table_name:
                    continue
                missing = [c for c in columns if c not in table.c]
                if missing:
                    raise ValidationError(
                        f"Table {table_name} has no column(s): {', '.join(missing)}",
                        {'table_name': table_name, 'missing': missing}
                    )
                return table
        return sa.table(table_name, *(sa.column(c) for c in columns))

    @staticmethod
    def _join_labels(joins: Sequence[Join]) -> List[str]:
        """Result labels of all joined columns, in select order; each must be unique."""
        labels = [label for join in joins for label in join.columns]
        duplicated = sorted({label for label in labels if labels.count(label) > 1})
        if duplicated:
            raise ValidationError(
                f"Join column labels must be unique, got duplicates: {', '.join(duplicated)}",
                {'labels': duplicated}
            )
        return labels

    def _extract_fields(self, model: ModelAbstraction, table_name: str) -> Dict[str, Any]:
        """Persistable column -> value pairs, minus id, extra_data and lifecycle columns."""
        extracted = model.extract()
        columns: List[str] = list(extracted.keys())
        values: List[Any] = list(extracted.values())

        if len(columns) != len(values):
            raise ColumnMismatchError(table_name, columns, values)

        return {
            column: value
            for column, value in zip(columns, values)
            if column not in NON_PERSISTED_FIELDS and column not in LIFECYCLE_FIELDS
        }

    def _execute(self, query, operation: str, table_name: str, consume: Callable[[Any], Any]) -> Any:
        """Run one statement and hand its result to `consume` before the connection is released."""
        logger.debug(f"{operation} on {table_name}: {query}")
        try:
            if isinstance(self.bind, Connection):
                return consume(self.bind.execute(query))
            with self.bind.begin() as conn:
                return consume(conn.execute(query))
        except SQLAlchemyError as e:
            logger.error(f"{operation} on {table_name} failed: {e}")
            raise

    def _hydrate(self, model_type: Type[M], record) -> M:
        try:
            return model_type(**dict(record))
        except pydantic.ValidationError as e:
            raise ValidationError(
                f"Failed to convert row to {model_type.__name__}: {e}",
                {'row': dict(record)},
                original_error=e
            ) from e

    @staticmethod
    def _check_model(model: Any) -> None:
        if not isinstance(model, ModelAbstraction):
            raise ValidationError(
                f"{type(model).__name__} does not implement ModelAbstraction",
                {'model': type(model).__name__}
            )

    @staticmethod
    def _check_model_type(model_type: Any) -> None:
        if not isinstance(model_type, type) or not issubclass(model_type, ModelAbstraction):
            raise ValidationError(
                f"{model_type!r} is not a ModelAbstraction class",
                {'model_type': repr(model_type)}
            )

    @staticmethod
    def _check_predicates(predicates: Sequence[Any]) -> None:
        for position, predicate in enumerate(predicates):
            if not isinstance(predicate, ColumnElement):
                raise InvalidPredicateError(predicate, position)


def create_gateway(config: DatabaseConfig) -> DataGateway:
    """
    Factory function to create a DataGateway from configuration.

    Args:
        config: Database configuration

    Returns:
        DataGateway bound to a new Engine

    Raises:
        ConnectionError: The URL is malformed or its driver is unavailable
    """
    try:
        engine = sa.create_engine(config.database_url, **config.engine_options())
    except (ArgumentError, NoSuchModuleError, ImportError) as e:
        logger.error(f"Failed to create engine: {e}")
        raise ConnectionError(
            f"Failed to create engine: {e}",
            original_error=e,
            context={'environment': config.environment}
        ) from e

    return DataGateway(
        engine,
        table_prefix=config.table_prefix,
        clock=utcnow
    )
