import itertools
from datetime import datetime
from pathlib import Path

import pytest

from inkwell.collections import (
    ItemCollection,
    TagCollection,
    all_of,
    any_of,
    chronological_key,
    has_tag,
    in_menu,
    is_dated,
    listing_key,
    menu_key,
    not_draft,
    not_hidden,
)
from inkwell.content import ContentItem, MenuPlacement


def make_item(path, title=None, date=None, draft=False, hidden=False, tags=(), menu=None):
    return ContentItem(
        path=path,
        title=title or path.title(),
        date=date,
        draft=draft,
        hidden=hidden,
        tags=frozenset(tags),
        summary=None,
        menu_placement=MenuPlacement(*menu) if menu else None,
        body="",
        source=Path(f"{path}.md"),
    )


def test_predicates():
    item = make_item("a", date=datetime(2024, 1, 1), tags=["python"], menu=("main", 1))
    draft = make_item("b", draft=True, hidden=True)
    assert not_draft(item) and not not_draft(draft)
    assert not_hidden(item) and not not_hidden(draft)
    assert is_dated(item) and not is_dated(draft)
    assert has_tag("python")(item) and not has_tag("python")(draft)
    assert in_menu("main")(item) and not in_menu("footer")(item)
    assert not in_menu("main")(draft)
    assert all_of(not_draft, has_tag("python"))(item)
    assert not all_of(not_draft, has_tag("rust"))(item)
    assert any_of(has_tag("rust"), is_dated)(item)
    assert all_of()(item)


def test_collection_filters():
    items = ItemCollection(
        [
            make_item("a", date=datetime(2024, 1, 2)),
            make_item("b", date=datetime(2024, 1, 3), draft=True),
            make_item("c", tags=["python"], hidden=True),
        ]
    )
    assert len(items) == 3
    assert items.published().paths() == ["a", "c"]
    assert items.drafts().paths() == ["b"]
    assert items.visible().paths() == ["a"]
    assert items.with_tag("python").paths() == ["c"]
    assert isinstance(items[:2], ItemCollection)
    assert items[0].path == "a"
    assert items == list(items)


def test_listing_order_groups_menu_then_evergreen_then_dated():
    items = ItemCollection(
        [
            make_item("old", date=datetime(2023, 6, 1)),
            make_item("zeta-page"),
            make_item("projects", menu=("main", 2)),
            make_item("new", date=datetime(2024, 6, 1)),
            make_item("alpha-page"),
            make_item("about", menu=("main", 1)),
            make_item("later-same-day", date=datetime(2024, 6, 1, 18, 30)),
        ]
    )
    assert items.sorted().paths() == [
        "about",
        "projects",
        "alpha-page",
        "zeta-page",
        "later-same-day",
        "new",
        "old",
    ]


def test_menu_order_is_total_and_independent_of_input_order():
    items = [
        make_item("b", title="Same", menu=("main", 1)),
        make_item("a", title="Same", menu=("main", 1)),
        make_item("c", title="Alpha", menu=("main", 1)),
        make_item("d", title="Zulu", menu=("main", 0)),
        make_item("e", title="Other", menu=("footer", 0)),
    ]
    expected = ["d", "c", "a", "b"]
    for permutation in itertools.permutations(items):
        assert ItemCollection(permutation).in_menu("main").paths() == expected
    keys = [menu_key(i) for i in items]
    assert len(set(keys)) == len(keys)


def test_menu_key_requires_placement():
    with pytest.raises(ValueError):
        menu_key(make_item("x"))


def test_chronological_and_latest():
    items = ItemCollection(
        [
            make_item("undated"),
            make_item("first", date=datetime(2024, 1, 1)),
            make_item("third", date=datetime(2024, 3, 1)),
            make_item("second", date=datetime(2024, 2, 1)),
        ]
    )
    assert items.chronological().paths() == ["third", "second", "first", "undated"]
    assert items.latest(2).paths() == ["third", "second"]
    assert sorted(items, key=chronological_key)[-1].path == "undated"
    assert listing_key(items[0])[0] == 1


def test_tag_collection():
    tags = TagCollection(
        [
            make_item("a", date=datetime(2024, 1, 1), tags=["python", "llm"]),
            make_item("b", date=datetime(2024, 2, 1), tags=["python"]),
            make_item("c"),
        ]
    )
    assert list(tags) == ["llm", "python"]
    assert tags["python"].paths() == ["b", "a"]
    assert tags.counts() == {"llm": 1, "python": 2}
    assert len(tags) == 2
    assert "rust" not in tags
