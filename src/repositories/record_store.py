"""Generic record store on SQLAlchemy Core.

Rows go in and come out as plain dicts keyed by column name. Every call
runs in its own transaction, so a single update either lands completely or
not at all. Calls made on the store yielded by ``transaction()`` share one
transaction and commit or roll back together.
"""

import uuid
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, ContextManager, Dict, Iterator, List, Optional, Protocol, Sequence

from sqlalchemy import MetaData, Table, delete, func, insert, select, update
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.exc import SQLAlchemyError

from repositories.schema import metadata as default_metadata
from utils.error_handling import RecordNotFoundError, StoreError
from utils.logging_config import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class Filter:
    """A single ``column <op> value`` condition."""

    column: str
    op: str
    value: Any = None


def eq(column: str, value: Any) -> Filter:
    return Filter(column, "eq", value)


def lte(column: str, value: Any) -> Filter:
    return Filter(column, "lte", value)


def not_null(column: str) -> Filter:
    return Filter(column, "not_null")


_OPERATORS = {
    "eq": lambda col, v: col == v,
    "ne": lambda col, v: col != v,
    "lt": lambda col, v: col < v,
    "lte": lambda col, v: col <= v,
    "gt": lambda col, v: col > v,
    "gte": lambda col, v: col >= v,
    "is_null": lambda col, v: col.is_(None),
    "not_null": lambda col, v: col.is_not(None),
    "ilike": lambda col, v: col.ilike(f"%{v}%"),
}


class RecordStore(Protocol):
    """The store contract services depend on."""

    def select(
        self,
        table: str,
        filters: Sequence[Filter] = (),
        order_by: Optional[str] = None,
        descending: bool = False,
        columns: Optional[Sequence[str]] = None,
    ) -> List[Dict[str, Any]]: ...

    def count(self, table: str, filters: Sequence[Filter] = ()) -> int: ...

    def insert(self, table: str, fields: Dict[str, Any]) -> str: ...

    def update(self, table: str, record_id: str, fields: Dict[str, Any]) -> None: ...

    def delete(self, table: str, record_id: str) -> None: ...

    def delete_where(self, table: str, filters: Sequence[Filter]) -> int: ...

    def transaction(self) -> ContextManager["RecordStore"]: ...


class SqlRecordStore:
    """Thin wrapper to keep SQL organized and parameterized."""

    def __init__(
        self,
        engine: Engine,
        metadata: MetaData = default_metadata,
        connection: Optional[Connection] = None,
    ):
        self.engine = engine
        self.metadata = metadata
        self._conn = connection

    @contextmanager
    def transaction(self) -> Iterator["SqlRecordStore"]:
        """Yield a store whose calls all run in one transaction."""
        if self._conn is not None:
            yield self
            return
        try:
            with self.engine.begin() as conn:
                yield SqlRecordStore(self.engine, self.metadata, connection=conn)
        except SQLAlchemyError as exc:
            logger.warning("Transaction failed", extra={"error": str(exc)})
            raise StoreError("Transaction failed") from exc

    @contextmanager
    def _connection(self, write: bool = False) -> Iterator[Connection]:
        if self._conn is not None:
            yield self._conn
        elif write:
            with self.engine.begin() as conn:
                yield conn
        else:
            with self.engine.connect() as conn:
                yield conn

    def _table(self, name: str) -> Table:
        table = self.metadata.tables.get(name)
        if table is None:
            raise StoreError(f"Unknown table: {name}")
        return table

    def _column(self, table: Table, name: str):
        if name not in table.c:
            raise StoreError(f"Unknown column: {table.name}.{name}")
        return table.c[name]

    def _where(self, table: Table, filters: Sequence[Filter]) -> list:
        clauses = []
        for flt in filters:
            operator = _OPERATORS.get(flt.op)
            if operator is None:
                raise StoreError(f"Unsupported filter operator: {flt.op}")
            clauses.append(operator(self._column(table, flt.column), flt.value))
        return clauses

    def select(
        self,
        table: str,
        filters: Sequence[Filter] = (),
        order_by: Optional[str] = None,
        descending: bool = False,
        columns: Optional[Sequence[str]] = None,
    ) -> List[Dict[str, Any]]:
        """Execute a SELECT and return rows as dicts."""
        tbl = self._table(table)
        cols = [self._column(tbl, c) for c in columns] if columns else [tbl]
        stmt = select(*cols).where(*self._where(tbl, filters))
        if order_by:
            col = self._column(tbl, order_by)
            stmt = stmt.order_by(col.desc() if descending else col.asc())

        try:
            with self._connection() as conn:
                return [dict(row._mapping) for row in conn.execute(stmt)]
        except SQLAlchemyError as exc:
            logger.warning("Select failed", extra={"table": table, "error": str(exc)})
            raise StoreError(f"Failed to read {table}") from exc

    def count(self, table: str, filters: Sequence[Filter] = ()) -> int:
        """Count rows matching filters."""
        tbl = self._table(table)
        stmt = select(func.count()).select_from(tbl).where(*self._where(tbl, filters))
        try:
            with self._connection() as conn:
                return int(conn.execute(stmt).scalar() or 0)
        except SQLAlchemyError as exc:
            logger.warning("Count failed", extra={"table": table, "error": str(exc)})
            raise StoreError(f"Failed to count {table}") from exc

    def insert(self, table: str, fields: Dict[str, Any]) -> str:
        """Insert a row and return its id (generated when absent)."""
        tbl = self._table(table)
        values = dict(fields)
        values.setdefault("id", str(uuid.uuid4()))
        for key in values:
            self._column(tbl, key)

        try:
            with self._connection(write=True) as conn:
                conn.execute(insert(tbl).values(**values))
        except SQLAlchemyError as exc:
            logger.warning("Insert failed", extra={"table": table, "error": str(exc)})
            raise StoreError(f"Failed to insert into {table}") from exc
        return values["id"]

    def update(self, table: str, record_id: str, fields: Dict[str, Any]) -> None:
        """Update the given fields of one row, all or nothing."""
        tbl = self._table(table)
        for key in fields:
            self._column(tbl, key)
        stmt = update(tbl).where(tbl.c.id == record_id).values(**fields)

        try:
            with self._connection(write=True) as conn:
                result = conn.execute(stmt)
        except SQLAlchemyError as exc:
            logger.warning(
                "Update failed",
                extra={"table": table, "record_id": record_id, "error": str(exc)},
            )
            raise StoreError(f"Failed to update {table} record {record_id}") from exc

        if result.rowcount == 0:
            raise RecordNotFoundError(f"{table} record {record_id} not found")

    def delete(self, table: str, record_id: str) -> None:
        """Delete one row by id."""
        tbl = self._table(table)
        try:
            with self._connection(write=True) as conn:
                result = conn.execute(delete(tbl).where(tbl.c.id == record_id))
        except SQLAlchemyError as exc:
            logger.warning(
                "Delete failed",
                extra={"table": table, "record_id": record_id, "error": str(exc)},
            )
            raise StoreError(f"Failed to delete {table} record {record_id}") from exc

        if result.rowcount == 0:
            raise RecordNotFoundError(f"{table} record {record_id} not found")

    def delete_where(self, table: str, filters: Sequence[Filter]) -> int:
        """Delete every row matching filters; returns the number removed."""
        tbl = self._table(table)
        if not filters:
            raise StoreError("Refusing to delete without filters")
        stmt = delete(tbl).where(*self._where(tbl, filters))
        try:
            with self._connection(write=True) as conn:
                return conn.execute(stmt).rowcount
        except SQLAlchemyError as exc:
            logger.warning("Bulk delete failed", extra={"table": table, "error": str(exc)})
            raise StoreError(f"Failed to delete from {table}") from exc
