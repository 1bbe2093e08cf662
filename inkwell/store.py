"""The content store.

ContentStore loads every content file under a directory into a mapping from
item path to ContentItem, validates the whole set, and answers the queries a
site assembler needs: listings, menus, single lookups and asset bytes.

The store is rebuilt wholesale on every load; there is no incremental update.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from pathlib import Path
from typing import Any

from .assets import AssetResolver
from .collections import (
    ItemCollection,
    Predicate,
    TagCollection,
    all_of,
    in_menu,
    is_dated,
    listing_key,
    menu_key,
    not_draft,
    not_hidden,
)
from .config import DEFAULT_CONFIG
from .content import ContentItem, DefaultItemBuilder, FileContentLoader
from .errors import DuplicatePath, ItemNotFound, MissingAsset, StrictModeError
from .protocols import ContentLoader, ItemBuilder

logger = logging.getLogger(__name__)

# Alias to avoid shadowing by ContentStore.list
_list = list


class ContentStore:
    """Validated, read-only collection of content items.

    Attributes:
        content_dir: Directory the store was loaded from.
        warnings: Missing assets found during the load (non-strict mode).
    """

    def __init__(
        self,
        content_dir: Path,
        items: dict[str, ContentItem],
        warnings: _list[MissingAsset] | None = None,
    ):
        self.content_dir = content_dir
        self._items = items
        self.warnings = _list(warnings or [])
        self._assets = AssetResolver(content_dir)

    @classmethod
    def load(
        cls,
        content_dir: Path,
        config: dict[str, Any] | None = None,
        loader: ContentLoader | None = None,
        builder: ItemBuilder | None = None,
    ) -> ContentStore:
        """Load and validate every content file under a directory.

        Args:
            content_dir: Directory containing content files.
            config: Optional configuration (see inkwell.config).
            loader: Optional custom content loader.
            builder: Optional custom item builder.

        Returns:
            A fully materialized ContentStore.

        Raises:
            FileNotFoundError: If the content directory does not exist.
            MalformedMetadata: If any file's front matter is invalid.
            DuplicatePath: If two files resolve to the same item path.
            StrictModeError: If strict mode is on and assets are missing.
        """
        settings = dict(DEFAULT_CONFIG)
        settings.update(config or {})
        if not content_dir.is_dir():
            raise FileNotFoundError(f"Expected content directory at {content_dir}")

        loader = loader or FileContentLoader(content_dir, settings["extensions"])
        builder = builder or DefaultItemBuilder(content_dir)

        items: dict[str, ContentItem] = {}
        for path in loader.iter_files():
            item = builder.build(path)
            existing = items.get(item.path)
            if existing is not None:
                raise DuplicatePath(item.path, existing.source, item.source)
            items[item.path] = item

        resolver = AssetResolver(content_dir)
        missing: _list[MissingAsset] = []
        for item in items.values():
            missing.extend(resolver.find_missing(item))
        if missing and settings["strict"]:
            raise StrictModeError(missing)
        for warning in missing:
            logger.warning("%s", warning)

        logger.info("Loaded %d content items from %s", len(items), content_dir)
        return cls(content_dir, items, missing)

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, path: object) -> bool:
        return path in self._items

    def __iter__(self) -> Iterator[ContentItem]:
        return iter(self.all())

    def all(self) -> ItemCollection:
        """Every item, drafts included, in listing order."""
        return ItemCollection(sorted(self._items.values(), key=listing_key))

    def list(
        self, filter: Predicate | None = None, *, include_drafts: bool = False
    ) -> ItemCollection:
        """Return items matching a predicate, in listing order.

        Drafts are excluded unless include_drafts is set, whatever the
        predicate says.

        Args:
            filter: Optional predicate, e.g. has_tag("python").
            include_drafts: Whether drafts may appear.

        Returns:
            ItemCollection ordered by listing_key.
        """
        predicates = [] if include_drafts else [not_draft]
        if filter is not None:
            predicates.append(filter)
        return self.all().filter(all_of(*predicates))

    def get(self, path: str) -> ContentItem:
        """Return the item with the given path.

        Raises:
            ItemNotFound: If no item has that path.
        """
        try:
            return self._items[path.strip("/")]
        except KeyError:
            raise ItemNotFound(path) from None

    def menu(self, name: str) -> ItemCollection:
        """Return the items placed in a menu, in menu order.

        Drafts and hidden items never appear.
        """
        matching = self.list(all_of(in_menu(name), not_hidden))
        return ItemCollection(sorted(matching, key=menu_key))

    def menus(self) -> dict[str, ItemCollection]:
        """Return every menu by name."""
        names = sorted(
            {i.menu_placement.menu for i in self.list(not_hidden) if i.menu_placement}
        )
        return {name: self.menu(name) for name in names}

    def posts(self) -> ItemCollection:
        """Return dated, published, non-hidden items, newest first."""
        return self.list(all_of(is_dated, not_hidden)).chronological()

    def tags(self) -> TagCollection:
        """Return published items grouped by tag."""
        return TagCollection(self.list())

    def asset_path(self, path: str, ref: str) -> Path:
        """Resolve an asset referenced by an item.

        Raises:
            ItemNotFound: If no item has that path.
            MissingAsset: If the asset does not exist.
        """
        return self._assets.path(self.get(path), ref)

    def read_asset(self, path: str, ref: str) -> bytes:
        """Read the bytes of an asset referenced by an item.

        Args:
            path: Item path.
            ref: Reference relative to the item's source file.

        Returns:
            File contents.

        Raises:
            ItemNotFound: If no item has that path.
            MissingAsset: If the asset does not exist.
        """
        return self._assets.read(self.get(path), ref)

    def __repr__(self) -> str:  # pragma: no cover - for debugging
        return f"ContentStore({len(self._items)} items from {self.content_dir})"
