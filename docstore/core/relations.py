"""Relations — foreign-key naming convention, embedding and delete cascades.

Invariants:
    - A child of collection A carries `{singular(A)}Id` equal to the parent's id
    - embed() returns a shallow copy; the stored record is never modified
    - Missing related collection -> record returned unchanged (no field, no error)
    - nullify_foreign_key() skips the collection the record was deleted from
    - delete_dependents() removes every record whose key is present and None,
      including ones nulled by earlier deletes

Design Decisions:
    - Convention is an object, not a hardcoded rule: tests and callers can swap
      pluralization without touching embed/cascade code
    - inflection for singular/plural: handles irregular nouns (people -> person)
"""

import inflection

from docstore.core.domain_types import Data, Item
from docstore.core.repository_protocols import NamingConvention


class ForeignKeyConvention:
    """Default `singularize(name) + "Id"` convention backed by inflection."""

    suffix = "Id"

    def singularize(self, name: str) -> str:
        return inflection.singularize(name)

    def pluralize(self, name: str) -> str:
        return inflection.pluralize(name)

    def foreign_key(self, name: str) -> str:
        return f"{self.singularize(name)}{self.suffix}"


DEFAULT_CONVENTION = ForeignKeyConvention()


def embed(
    data: Data, name: str, item: Item, related: str,
    convention: NamingConvention = DEFAULT_CONVENTION,
) -> Item:
    """Attach `related` records to a copy of `item`.

    List collection named `related` -> one-to-many: children of `item` in it.
    No collection named `related` but a list collection `plural(related)` ->
    many-to-one: the parent referenced by `item["{related}Id"]`.
    """
    children = data.get(related)
    if not isinstance(children, list):
        if related in data:
            return item
        plural = convention.pluralize(related)
        parents = data.get(plural)
        if plural == related or not isinstance(parents, list):
            return item
        parent_id = item.get(f"{related}Id")
        parent = next(
            (p for p in parents if "id" in p and p["id"] == parent_id), None,
        )
        return {**item, related: parent}

    foreign_key = convention.foreign_key(name)
    matches = [
        child for child in children
        if foreign_key in child and child[foreign_key] == item.get("id")
    ]
    return {**item, related: matches}


def nullify_foreign_key(
    data: Data, name: str, item_id: str,
    convention: NamingConvention = DEFAULT_CONVENTION,
) -> int:
    """Set `{singular(name)}Id` to None wherever it references `item_id`.

    Returns the number of records touched.
    """
    foreign_key = convention.foreign_key(name)
    touched = 0
    for key, items in data.items():
        if key == name or not isinstance(items, list):
            continue
        for child in items:
            if foreign_key in child and child[foreign_key] == item_id:
                child[foreign_key] = None
                touched += 1
    return touched


def delete_dependents(
    data: Data, name: str, dependents: list[str],
    convention: NamingConvention = DEFAULT_CONVENTION,
) -> int:
    """Drop records with a null `{singular(name)}Id` from each dependent collection.

    Returns the number of records removed.
    """
    foreign_key = convention.foreign_key(name)
    removed = 0
    for key, items in data.items():
        if key not in dependents or not isinstance(items, list):
            continue
        kept = [
            child for child in items
            if not (foreign_key in child and child[foreign_key] is None)
        ]
        removed += len(items) - len(kept)
        items[:] = kept
    return removed
