"""Query Pipeline — filter, sort and paginate a list collection.

Invariants:
    - All functions are PURE: no IO, no async; inputs are never mutated
    - Distinct filter keys AND together; several values for one key OR together
    - Reserved parameters (leading underscore, see domain_types) never filter
    - Numbers compare numerically when BOTH sides parse as finite numbers
    - Sorting is stable: ties keep insertion order, first _sort field is primary
    - Slice mode (_start/_end/_limit) wins over page mode (_page/_per_page)

Design Decisions:
    - MISSING sentinel instead of None: a field set to null and an absent field
      behave differently under eq/ne
    - Integer parameters re-parsed here as well as at the HTTP boundary, so direct
      callers may pass "2" or 2 alike; unparseable values are ignored
"""

import json
import math
import re
from typing import Any

from docstore.core.domain_types import (
    Condition,
    DEFAULT_PER_PAGE,
    END_PARAM,
    Item,
    LIMIT_PARAM,
    ORDER_PARAM,
    PAGE_PARAM,
    PER_PAGE_PARAM,
    PaginatedItems,
    RESERVED_PARAMS,
    SORT_PARAM,
    START_PARAM,
)

MISSING = object()

_CONDITION_SUFFIX = re.compile(r"^(?P<field>.+)_(?P<op>lt|lte|gt|gte|ne)$")


# === Field access =============================================================

def get_property(item: Any, path: str) -> Any:
    """Resolve a dot path (`author.name`, `tags.0`); MISSING when absent."""
    value = item
    for segment in path.split("."):
        if isinstance(value, dict):
            if segment not in value:
                return MISSING
            value = value[segment]
        elif isinstance(value, list) and segment.isdigit():
            index = int(segment)
            if index >= len(value):
                return MISSING
            value = value[index]
        else:
            return MISSING
    return value


# === Filtering ================================================================

def parse_filter_key(key: str) -> tuple[str, Condition]:
    """Split `views_lt` into ("views", LT); plain keys mean equality."""
    match = _CONDITION_SUFFIX.match(key)
    if match:
        return match.group("field"), Condition(match.group("op"))
    return key, Condition.EQ


def build_conditions(query: dict[str, Any]) -> list[tuple[str, Condition, list[Any]]]:
    """Turn non-reserved query entries into (field, op, values) triples."""
    conditions = []
    for key, value in query.items():
        if key in RESERVED_PARAMS or value is None:
            continue
        values = list(value) if isinstance(value, (list, tuple)) else [value]
        if not values:
            continue
        field, op = parse_filter_key(key)
        conditions.append((field, op, values))
    return conditions


def _to_number(value: Any) -> float | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value) if math.isfinite(value) else None
    if isinstance(value, str):
        try:
            number = float(value)
        except ValueError:
            return None
        return number if math.isfinite(number) else None
    return None


def _equals(item_value: Any, param: Any) -> bool:
    if not isinstance(param, str):
        return (
            item_value == param
            and isinstance(item_value, bool) == isinstance(param, bool)
        )
    if isinstance(item_value, bool):
        return param in ("true", "false") and item_value == (param == "true")
    if item_value is None:
        return param == "null"
    if isinstance(item_value, str):
        return item_value == param
    return False


def compare(item_value: Any, op: Condition, param: Any) -> bool:
    """Evaluate one `item_value <op> param` comparison."""
    if item_value is MISSING:
        return op == Condition.NE

    left, right = _to_number(item_value), _to_number(param)
    if left is None or right is None:
        if op in (Condition.EQ, Condition.NE):
            equal = _equals(item_value, param)
            return equal if op == Condition.EQ else not equal
        if not (isinstance(item_value, str) and isinstance(param, str)):
            return False
        left, right = item_value, param

    if op == Condition.EQ:
        return left == right
    if op == Condition.NE:
        return left != right
    if op == Condition.LT:
        return left < right
    if op == Condition.LTE:
        return left <= right
    if op == Condition.GT:
        return left > right
    return left >= right


def matches(item: Item, conditions: list[tuple[str, Condition, list[Any]]]) -> bool:
    return all(
        any(compare(get_property(item, field), op, value) for value in values)
        for field, op, values in conditions
    )


def filter_items(items: list[Item], query: dict[str, Any]) -> list[Item]:
    conditions = build_conditions(query)
    if not conditions:
        return list(items)
    return [item for item in items if matches(item, conditions)]


# === Sorting ==================================================================

def _csv(value: Any) -> list[str]:
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        value = ",".join(str(v) for v in value)
    return [part.strip() for part in str(value).split(",") if part.strip()]


def parse_sort(sort: Any, order: Any = None) -> list[tuple[str, bool]]:
    """Parse `_sort`/`_order` into (field, descending) pairs."""
    directions = [d.lower() for d in _csv(order)]
    fields = []
    for index, raw in enumerate(_csv(sort)):
        descending = raw.startswith("-")
        field = raw.lstrip("-")
        if not field:
            continue
        if index < len(directions) and directions[index] == "desc":
            descending = True
        fields.append((field, descending))
    return fields


def _sort_key(value: Any) -> tuple:
    if value is MISSING or value is None:
        return (4, 0)
    if isinstance(value, bool):
        return (2, value)
    if isinstance(value, (int, float)):
        return (0, value)
    if isinstance(value, str):
        return (1, value)
    return (3, json.dumps(value, sort_keys=True, default=str))


def sort_items(items: list[Item], sort: Any, order: Any = None) -> list[Item]:
    """Stable multi-key sort; no `_sort` keeps insertion order."""
    result = list(items)
    for field, descending in reversed(parse_sort(sort, order)):
        result.sort(
            key=lambda item: _sort_key(get_property(item, field)),
            reverse=descending,
        )
    return result


# === Pagination ===============================================================

def int_param(query: dict[str, Any], key: str) -> int | None:
    """Integer value of a reserved parameter, None when absent or unparseable."""
    value = query.get(key)
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (list, tuple)):
        value = value[-1] if value else None
        if value is None:
            return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def slice_items(
    items: list[Item], start: int | None, end: int | None, limit: int | None,
) -> list[Item]:
    """Zero-based slice; an exclusive `end` wins over a count `limit`."""
    begin = max(start or 0, 0)
    if end is not None:
        return items[begin:max(end, 0)]
    if limit is not None:
        return items[begin:begin + max(limit, 0)]
    return items[begin:]


def paginate(items: list[Item], page: int | None, per_page: int | None) -> PaginatedItems:
    """Page-mode envelope; page and per_page clamp to >= 1, page to <= last."""
    per_page = max(per_page if per_page is not None else DEFAULT_PER_PAGE, 1)
    total = len(items)
    pages = max(math.ceil(total / per_page), 1)
    page = min(max(page if page is not None else 1, 1), pages)

    start = (page - 1) * per_page
    return {
        "first": 1,
        "prev": page - 1 if page > 1 else None,
        "next": page + 1 if page < pages else None,
        "last": pages,
        "pages": pages,
        "items": total,
        "data": items[start:start + per_page],
    }


def run_pipeline(items: list[Item], query: dict[str, Any]) -> list[Item] | PaginatedItems:
    """Filter -> sort -> slice or paginate an already-embedded list."""
    filtered = filter_items(items, query)
    ordered = sort_items(filtered, query.get(SORT_PARAM), query.get(ORDER_PARAM))

    start = int_param(query, START_PARAM)
    end = int_param(query, END_PARAM)
    limit = int_param(query, LIMIT_PARAM)
    if start is not None or end is not None or limit is not None:
        return slice_items(ordered, start, end, limit)

    page = int_param(query, PAGE_PARAM)
    per_page = int_param(query, PER_PAGE_PARAM)
    if page is not None or per_page is not None:
        return paginate(ordered, page, per_page)

    return ordered
