import logging
from dataclasses import dataclass
from typing import Any, Mapping, Protocol, Sequence, TypeVar

import httpx
from pydantic import BaseModel, ValidationError
from supabase import AsyncClient, PostgrestAPIError

from marketplace.core.errors import RemoteFailure

logger = logging.getLogger(__name__)

Row = dict[str, Any]
Filters = Mapping[str, Any]

M = TypeVar("M", bound=BaseModel)


@dataclass(frozen=True)
class Order:
    column: str
    desc: bool = False


@dataclass(frozen=True)
class Join:
    """
    Read-time enrichment: embed the row of `table` whose `id` equals
    this row's `on` column under the key `alias`.

    Example: Join("product", "products", "product_id") turns a cart row
    into {..., "product": {...products row...}}.
    """

    alias: str
    table: str
    on: str
    columns: str = "*"

    def render(self) -> str:
        # PostgREST embedding through the foreign key column
        return f"{self.alias}:{self.on}({self.columns})"


class Store(Protocol):
    """
    Row-level CRUD over remote tables.

    All filters are equality on column values. Implementations raise
    RemoteFailure for anything the remote side rejects.
    """

    async def select(
        self,
        table: str,
        filters: Filters | None = None,
        order: Order | None = None,
        joins: Sequence[Join] = (),
    ) -> list[Row]: ...

    async def insert(self, table: str, row: Row) -> Row: ...

    async def update(self, table: str, filters: Filters, patch: Row) -> None: ...

    async def delete(self, table: str, filters: Filters) -> None: ...


class SupabaseStore:
    """
    Store backed by Supabase Postgres through PostgREST.

    Row Level Security still applies: the anon client only sees rows
    the signed-in user is allowed to see.
    """

    def __init__(self, client: AsyncClient):
        self.client = client

    @staticmethod
    def _apply_filters(query, filters: Filters | None):
        for column, value in (filters or {}).items():
            query = query.eq(column, str(value))
        return query

    async def _execute(self, action: str, table: str, query) -> list[Row]:
        try:
            response = await query.execute()
        except PostgrestAPIError as e:
            logger.error(f"{action} on {table} rejected: {e.message}")
            raise RemoteFailure(e.message or f"Failed to {action} {table}") from e
        except httpx.HTTPError as e:
            logger.error(f"{action} on {table} failed: {e}")
            raise RemoteFailure(f"Failed to {action} {table}") from e
        return response.data or []

    async def select(
        self,
        table: str,
        filters: Filters | None = None,
        order: Order | None = None,
        joins: Sequence[Join] = (),
    ) -> list[Row]:
        columns = ", ".join(["*", *(join.render() for join in joins)])
        query = self._apply_filters(self.client.table(table).select(columns), filters)
        if order is not None:
            query = query.order(order.column, desc=order.desc)
        return await self._execute("select", table, query)

    async def insert(self, table: str, row: Row) -> Row:
        rows = await self._execute("insert", table, self.client.table(table).insert(row))
        if not rows:
            raise RemoteFailure(f"Insert into {table} returned no row")
        return rows[0]

    async def update(self, table: str, filters: Filters, patch: Row) -> None:
        query = self._apply_filters(self.client.table(table).update(patch), filters)
        await self._execute("update", table, query)

    async def delete(self, table: str, filters: Filters) -> None:
        query = self._apply_filters(self.client.table(table).delete(), filters)
        await self._execute("delete", table, query)


def parse_rows(model: type[M], rows: Sequence[Row], table: str) -> list[M]:
    """
    Validate raw rows into `model`.

    A row that does not match the model (e.g. a joined product with a
    missing column) is a remote-side problem: raised as RemoteFailure.
    """
    try:
        return [model.model_validate(row) for row in rows]
    except ValidationError as e:
        logger.error(f"Malformed row from {table}: {e}")
        raise RemoteFailure(f"Unexpected data from {table}") from e
