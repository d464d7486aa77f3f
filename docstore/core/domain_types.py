"""Domain Types — names for the schema-free shapes the query engine works on.

Invariants:
    - Item is an ordered str-keyed mapping of JSON values (dict preserves insertion order)
    - Data maps collection name to list[Item] (list collection) or Item (singleton)
    - Every reserved query parameter starts with an underscore and never filters

Design Decisions:
    - Type aliases over dataclasses: records are schema-free, only `id` is typed
      (ADR: no schema enforcement beyond identifier typing)
    - str Enum for Condition: query suffixes map 1:1 to enum values
"""

from enum import Enum
from typing import Any, TypedDict


# ─── Shapes ──────────────────────────────────────────────────────

Item = dict[str, Any]
Collection = list[Item] | Item
Data = dict[str, Collection]


class PaginatedItems(TypedDict):
    """Page-mode result of find()."""
    first: int
    prev: int | None
    next: int | None
    last: int
    pages: int
    items: int
    data: list[Item]


# ─── Enums ───────────────────────────────────────────────────────

class Condition(str, Enum):
    """Filter operators, written as `<field>_<op>` in query keys."""
    LT = "lt"
    LTE = "lte"
    GT = "gt"
    GTE = "gte"
    NE = "ne"
    EQ = ""


# ─── Reserved query parameters ───────────────────────────────────

EMBED_PARAM = "_embed"
SORT_PARAM = "_sort"
ORDER_PARAM = "_order"
START_PARAM = "_start"
END_PARAM = "_end"
LIMIT_PARAM = "_limit"
PAGE_PARAM = "_page"
PER_PAGE_PARAM = "_per_page"
DEPENDENT_PARAM = "_dependent"

INTEGER_PARAMS = (START_PARAM, END_PARAM, LIMIT_PARAM, PAGE_PARAM, PER_PAGE_PARAM)
RESERVED_PARAMS = frozenset(
    (EMBED_PARAM, SORT_PARAM, ORDER_PARAM, DEPENDENT_PARAM) + INTEGER_PARAMS,
)

DEFAULT_PER_PAGE = 10


def is_item(obj: object) -> bool:
    """True for a JSON object (the only valid record shape)."""
    return isinstance(obj, dict)


def ensure_list(arg: str | list[str] | None) -> list[str]:
    """Normalize a single name or a list of names to a list."""
    if arg is None:
        return []
    if isinstance(arg, (list, tuple)):
        return list(arg)
    return [arg]
