"""Asset resolution for Inkwell.

Images and other files referenced from a body resolve relative to the item's
own source directory, never to a global asset root.

Key classes:
- AssetResolver: Resolves and reads item-relative asset references.
"""

from __future__ import annotations

import logging
from pathlib import Path

from .content import ContentItem
from .errors import MissingAsset
from .utils import clean_reference, is_local_reference

logger = logging.getLogger(__name__)


class AssetResolver:
    """Resolves asset references relative to content items.

    Attributes:
        content_dir: Directory containing content; references may not
            escape it.
    """

    def __init__(self, content_dir: Path):
        self.content_dir = content_dir.resolve()

    def resolve(self, item: ContentItem, ref: str) -> Path:
        """Resolve a reference to a filesystem path.

        Args:
            item: Item whose body holds the reference.
            ref: Relative reference, e.g. "images/diagram.png".

        Returns:
            Absolute path to the asset. The file may not exist.

        Raises:
            ValueError: If the reference is not local or escapes the
                content directory.
        """
        if not is_local_reference(ref):
            raise ValueError(f"'{ref}' is not an item-relative reference")
        base = item.source.resolve().parent
        target = (base / clean_reference(ref)).resolve()
        if not target.is_relative_to(self.content_dir):
            raise ValueError(f"'{ref}' resolves outside the content directory")
        return target

    def path(self, item: ContentItem, ref: str) -> Path:
        """Resolve a reference to an existing file.

        Raises:
            MissingAsset: If the file does not exist.
        """
        target = self.resolve(item, ref)
        if not target.is_file():
            raise MissingAsset(item.source, ref, target)
        return target

    def read(self, item: ContentItem, ref: str) -> bytes:
        """Read an asset's bytes.

        Args:
            item: Item whose body holds the reference.
            ref: Relative reference.

        Returns:
            File contents.

        Raises:
            MissingAsset: If the file does not exist.
        """
        return self.path(item, ref).read_bytes()

    def find_missing(self, item: ContentItem) -> list[MissingAsset]:
        """Check every asset an item references.

        References that escape the content directory count as missing.

        Args:
            item: Item to check.

        Returns:
            One MissingAsset per unresolved reference.
        """
        missing: list[MissingAsset] = []
        for ref in item.assets:
            try:
                target = self.resolve(item, ref)
            except ValueError:
                missing.append(MissingAsset(item.source, ref, item.source.parent / ref))
                continue
            if not target.is_file():
                missing.append(MissingAsset(item.source, ref, target))
        return missing
