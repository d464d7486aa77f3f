"""Identifier Normalization — every record in a list collection gets a string id.

Invariants:
    - Only an absent `id` is generated; an existing value is never replaced
    - Numeric ids are stringified (2.0 -> "2"), booleans are left alone
    - Singleton collections are never touched
    - Runs once, collection-then-record order, before any query is served

Design Decisions:
    - 2 random bytes (4 hex chars): short ids for hand-edited mock data, no
      uniqueness check against existing ids (ADR: collision handling left to caller)
"""

import secrets

from docstore.core.domain_types import Data, Item

ID_BYTES = 2


def random_id() -> str:
    """Short random hex token. Not guaranteed unique."""
    return secrets.token_hex(ID_BYTES)


def _stringify_number(value: int | float) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def fix_item_ids(items: list[Item]) -> None:
    """Normalize ids of one list collection in place."""
    for item in items:
        value = item.get("id")
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            item["id"] = _stringify_number(value)
        if "id" not in item:
            item["id"] = random_id()


def fix_all_item_ids(data: Data) -> None:
    """Normalize ids of every list collection in the store."""
    for value in data.values():
        if isinstance(value, list):
            fix_item_ids(value)
