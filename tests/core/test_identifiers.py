"""Identifier normalization — tests for fix_all_item_ids and random_id.

Tests cover:
    - Missing ids generated as non-empty strings
    - Existing string ids never changed
    - Numeric ids stringified, not regenerated
    - Singleton collections untouched
"""

from docstore.core.identifiers import fix_all_item_ids, fix_item_ids, random_id


def test_random_id_is_short_hex_string():
    value = random_id()
    assert isinstance(value, str)
    assert len(value) == 4
    int(value, 16)


def test_missing_id_is_generated():
    items = [{"id": "1"}, {}]
    fix_item_ids(items)
    assert items[0]["id"] == "1"
    assert isinstance(items[1]["id"], str) and items[1]["id"]


def test_numeric_ids_are_stringified():
    items = [{"id": 1}, {"id": 2.0}, {"id": 2.5}]
    fix_item_ids(items)
    assert [i["id"] for i in items] == ["1", "2", "2.5"]


def test_null_id_is_kept():
    items = [{"id": None}]
    fix_item_ids(items)
    assert items[0]["id"] is None


def test_fix_all_skips_singletons():
    data = {"posts": [{"title": "x"}, {"id": 7}], "object": {"f1": "foo"}}
    fix_all_item_ids(data)
    assert isinstance(data["posts"][0]["id"], str)
    assert data["posts"][1]["id"] == "7"
    assert data["object"] == {"f1": "foo"}


def test_generated_ids_keep_other_fields():
    items = [{"title": "x", "views": 1}]
    fix_item_ids(items)
    assert items[0]["title"] == "x"
    assert items[0]["views"] == 1
