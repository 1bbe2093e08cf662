"""Collections, filters and ordering for content items.

Predicates are plain callables ``ContentItem -> bool`` so callers can pass
their own to ContentStore.list alongside the ones defined here.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator, Mapping, Sequence

from .content import ContentItem

Predicate = Callable[[ContentItem], bool]


def not_draft(item: ContentItem) -> bool:
    return not item.draft


def not_hidden(item: ContentItem) -> bool:
    return not item.hidden


def is_dated(item: ContentItem) -> bool:
    return item.date is not None


def has_tag(tag: str) -> Predicate:
    def predicate(item: ContentItem) -> bool:
        return tag in item.tags

    return predicate


def in_menu(name: str) -> Predicate:
    def predicate(item: ContentItem) -> bool:
        return item.menu_placement is not None and item.menu_placement.menu == name

    return predicate


def all_of(*predicates: Predicate) -> Predicate:
    def predicate(item: ContentItem) -> bool:
        return all(p(item) for p in predicates)

    return predicate


def any_of(*predicates: Predicate) -> Predicate:
    def predicate(item: ContentItem) -> bool:
        return any(p(item) for p in predicates)

    return predicate


def _tie_break(item: ContentItem) -> tuple[str, str]:
    return (item.title.casefold(), item.path)


def menu_key(item: ContentItem) -> tuple:
    """Sort key for menu order: menu, weight, then title and path.

    Paths are unique in a store, so this is a strict total order.
    """
    placement = item.menu_placement
    if placement is None:
        raise ValueError(f"{item.path} has no menu placement")
    return (placement.menu, placement.weight, *_tie_break(item))


def listing_key(item: ContentItem) -> tuple:
    """Sort key for general listings.

    Order:
    1. Items with a menu placement, in menu order.
    2. Undated (evergreen) items, by title then path.
    3. Dated items, newest first, then by title and path.
    """
    if item.menu_placement is not None:
        return (0, menu_key(item))
    if item.date is None:
        return (1, _tie_break(item))
    # Negated ordinal keeps newest first while the tie break stays ascending.
    return (2, (-item.date.toordinal(), -_seconds(item), *_tie_break(item)))


def chronological_key(item: ContentItem) -> tuple:
    """Sort key for newest-first listings; undated items sort last."""
    if item.date is None:
        return (1, 0, 0, *_tie_break(item))
    return (0, -item.date.toordinal(), -_seconds(item), *_tie_break(item))


def _seconds(item: ContentItem) -> float:
    moment = item.date
    return moment.hour * 3600 + moment.minute * 60 + moment.second + moment.microsecond / 1e6


class ItemCollection(Sequence[ContentItem]):
    """Ordered, immutable sequence of ContentItems with query helpers."""

    def __init__(self, items: Iterable[ContentItem]):
        self._items = list(items)

    def __iter__(self) -> Iterator[ContentItem]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __getitem__(self, index):
        if isinstance(index, slice):
            return ItemCollection(self._items[index])
        return self._items[index]

    def __eq__(self, other) -> bool:
        if isinstance(other, ItemCollection):
            return self._items == other._items
        if isinstance(other, list):
            return self._items == other
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def filter(self, predicate: Predicate) -> ItemCollection:
        return ItemCollection(i for i in self._items if predicate(i))

    def published(self) -> ItemCollection:
        return self.filter(not_draft)

    def drafts(self) -> ItemCollection:
        return ItemCollection(i for i in self._items if i.draft)

    def visible(self) -> ItemCollection:
        return self.filter(all_of(not_draft, not_hidden))

    def with_tag(self, tag: str) -> ItemCollection:
        return self.filter(has_tag(tag))

    def in_menu(self, name: str) -> ItemCollection:
        return ItemCollection(sorted(self.filter(in_menu(name)), key=menu_key))

    def sorted(self) -> ItemCollection:
        """Return the items in listing order (see listing_key)."""
        return ItemCollection(sorted(self._items, key=listing_key))

    def chronological(self) -> ItemCollection:
        """Return the items newest first, undated items last."""
        return ItemCollection(sorted(self._items, key=chronological_key))

    def latest(self, count: int = 5) -> ItemCollection:
        return self.filter(is_dated).chronological()[:count]

    def paths(self) -> list[str]:
        return [i.path for i in self._items]

    def __repr__(self) -> str:  # pragma: no cover - for debugging
        return f"ItemCollection({len(self._items)} items)"


class TagCollection(Mapping[str, ItemCollection]):
    """Mapping of tag name to ItemCollection, sorted by tag name."""

    def __init__(self, items: Iterable[ContentItem]):
        mapping: dict[str, list[ContentItem]] = {}
        for item in items:
            for tag in item.tags:
                mapping.setdefault(tag, []).append(item)
        self._mapping = {
            tag: ItemCollection(mapping[tag]).chronological() for tag in sorted(mapping)
        }

    def __getitem__(self, key: str) -> ItemCollection:
        return self._mapping[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._mapping)

    def __len__(self) -> int:
        return len(self._mapping)

    def counts(self) -> dict[str, int]:
        return {tag: len(items) for tag, items in self._mapping.items()}

    def __repr__(self) -> str:  # pragma: no cover - for debugging
        return f"TagCollection({len(self._mapping)} tags)"
