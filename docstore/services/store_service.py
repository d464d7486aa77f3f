"""Store Service — query and mutation operations over the loaded document store.

Invariants:
    - Identifier normalization runs once, in the constructor, before any query
    - None is the only "not found" signal (missing collection, wrong kind, unknown id)
    - Reads never mutate the store; embedding always works on copies
    - Mutations edit the store synchronously, THEN await db.write()
    - A failed write propagates and leaves the in-memory edit in place (no rollback)
    - `id` is immutable once assigned: create mints it, update_by_id keeps it

Design Decisions:
    - Store threaded through an explicit Database object, not a module global:
      tests build isolated instances over MemoryAdapter
    - Thin orchestration over core/ pure functions (ADR: impureim sandwich)
"""

import logging
from typing import Any

from docstore.core.domain_types import (
    Collection, DEPENDENT_PARAM, EMBED_PARAM, Item, PaginatedItems, ensure_list,
)
from docstore.core.identifiers import fix_all_item_ids, random_id
from docstore.core.query import run_pipeline
from docstore.core.relations import (
    DEFAULT_CONVENTION, delete_dependents, embed, nullify_foreign_key,
)
from docstore.core.repository_protocols import NamingConvention
from docstore.infrastructure.database import Database

logger = logging.getLogger(__name__)


class StoreService:
    """Query engine bound to one Database."""

    def __init__(
        self, db: Database, convention: NamingConvention = DEFAULT_CONVENTION,
    ):
        fix_all_item_ids(db.data)
        self._db = db
        self._convention = convention

    # ─── Lookup ──────────────────────────────────────────────────

    def has(self, name: str) -> bool:
        return name in self._db.data

    def get(self, name: str) -> Collection | None:
        return self._db.data.get(name)

    def collections(self) -> list[str]:
        return list(self._db.data)

    def _list(self, name: str) -> list[Item] | None:
        value = self.get(name)
        return value if isinstance(value, list) else None

    def _embed_all(self, name: str, item: Item, related: list[str]) -> Item:
        for rel in related:
            item = embed(self._db.data, name, item, rel, self._convention)
        return item

    def find_by_id(
        self, name: str, item_id: str, query: dict[str, Any] | None = None,
    ) -> Item | None:
        items = self._list(name)
        if items is None:
            return None
        item = next((i for i in items if i.get("id") == item_id), None)
        if item is None:
            return None
        return self._embed_all(
            name, item, ensure_list((query or {}).get(EMBED_PARAM)),
        )

    def find(
        self, name: str, query: dict[str, Any] | None = None,
    ) -> list[Item] | PaginatedItems | Item | None:
        """List a collection through embed -> filter -> sort -> paginate.

        Singleton collections are returned as-is; query parameters do not apply.
        """
        value = self.get(name)
        if not isinstance(value, list):
            return value

        query = query or {}
        related = ensure_list(query.get(EMBED_PARAM))
        items = [self._embed_all(name, item, related) for item in value]
        return run_pipeline(items, query)

    # ─── Mutation ────────────────────────────────────────────────

    async def create(self, name: str, data: Item | None = None) -> Item | None:
        """Append a record with a freshly minted id (any given id is discarded)."""
        items = self._list(name)
        if items is None:
            return None

        fields = {k: v for k, v in (data or {}).items() if k != "id"}
        item = {"id": random_id(), **fields}
        items.append(item)
        logger.info(
            f"Created {name}/{item['id']}",
            extra={"collection": name, "item_id": item["id"]},
        )
        await self._db.write()
        return item

    async def update(self, name: str, data: Item | None = None) -> Item | None:
        """Replace a singleton collection wholesale."""
        current = self.get(name)
        if current is None or isinstance(current, list):
            return None

        item = dict(data or {})
        self._db.data[name] = item
        logger.info(f"Replaced {name}", extra={"collection": name})
        await self._db.write()
        return item

    async def patch(self, name: str, data: Item | None = None) -> Item | None:
        """Shallow-merge fields into a singleton collection."""
        current = self.get(name)
        if current is None or isinstance(current, list):
            return None

        item = {**current, **(data or {})}
        self._db.data[name] = item
        logger.info(f"Patched {name}", extra={"collection": name})
        await self._db.write()
        return item

    async def update_by_id(
        self, name: str, item_id: str, body: Item | None = None,
    ) -> Item | None:
        """Merge `body` onto a record in place; `id` cannot change."""
        items = self._list(name)
        if items is None:
            return None
        index = next(
            (i for i, item in enumerate(items) if item.get("id") == item_id), None,
        )
        if index is None:
            return None

        next_item = {**items[index], **(body or {}), "id": item_id}
        items[index] = next_item
        logger.info(
            f"Updated {name}/{item_id}",
            extra={"collection": name, "item_id": item_id},
        )
        await self._db.write()
        return next_item

    async def destroy_by_id(
        self, name: str, item_id: str, dependents: str | list[str] | None = None,
    ) -> Item | None:
        """Delete a record, null references to it, then purge dependent collections.

        Dependents lose EVERY record whose foreign key is null, not only the
        ones nulled by this call.
        """
        items = self._list(name)
        if items is None:
            return None
        index = next(
            (i for i, item in enumerate(items) if item.get("id") == item_id), None,
        )
        if index is None:
            return None

        item = items.pop(index)
        nulled = nullify_foreign_key(self._db.data, name, item_id, self._convention)
        removed = delete_dependents(
            self._db.data, name, ensure_list(dependents), self._convention,
        )
        logger.info(
            f"Deleted {name}/{item_id} "
            f"({nulled} reference(s) nulled, {removed} dependent(s) removed)",
            extra={"collection": name, "item_id": item_id},
        )
        await self._db.write()
        return item


def dependents_from_query(query: dict[str, Any]) -> list[str]:
    """Cascade targets named by `_dependent` (string or list)."""
    return ensure_list(query.get(DEPENDENT_PARAM))
