"""Query Parameter Parsing — flat HTTP query string to the core's query dict.

Invariants:
    - A key repeated in the URL becomes a list, a single key stays a string
    - Integer reserved parameters are parsed here; unparseable ones are dropped
"""

from typing import Any, Iterable

from docstore.core.domain_types import INTEGER_PARAMS


def parse_query(pairs: Iterable[tuple[str, str]]) -> dict[str, Any]:
    grouped: dict[str, Any] = {}
    for key, value in pairs:
        if key in grouped:
            existing = grouped[key]
            grouped[key] = existing + [value] if isinstance(existing, list) else [existing, value]
        else:
            grouped[key] = value

    query: dict[str, Any] = {}
    for key, value in grouped.items():
        if key in INTEGER_PARAMS:
            raw = value[-1] if isinstance(value, list) else value
            try:
                query[key] = int(raw)
            except ValueError:
                continue
        else:
            query[key] = value
    return query
