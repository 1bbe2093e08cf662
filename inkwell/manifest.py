"""Manifest export for Inkwell.

The manifest is the hand-off to the site assembler: a single JSON document
holding every published item with its metadata, the menus, the tag index and
the chronological post list, all in their final order.

Key functions:
- build_manifest: Build the manifest as a JSON-ready dict.
- write_manifest: Write the manifest to a file.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from . import __version__
from .renderers import render_body
from .store import ContentStore

logger = logging.getLogger(__name__)


def build_manifest(
    store: ContentStore, include_html: bool = False, base_url: str = ""
) -> dict[str, Any]:
    """Build the manifest for a store.

    Args:
        store: Loaded content store.
        include_html: Whether to add each item's rendered body.
        base_url: Prefix for asset URLs in rendered HTML.

    Returns:
        Dictionary ready for json.dumps.
    """
    items = []
    for item in store.list():
        entry = item.to_dict()
        entry["source"] = item.source.relative_to(store.content_dir).as_posix()
        if include_html:
            entry["html"] = render_body(item, base_url)
        items.append(entry)
    return {
        "generator": f"inkwell {__version__}",
        "generated_at": datetime.now(timezone.utc).isoformat(),
        "items": items,
        "menus": {name: menu.paths() for name, menu in store.menus().items()},
        "tags": {tag: tagged.paths() for tag, tagged in store.tags().items()},
        "posts": store.posts().paths(),
    }


def write_manifest(
    store: ContentStore,
    target: Path,
    include_html: bool = False,
    base_url: str = "",
) -> Path:
    """Write the manifest as indented JSON.

    Args:
        store: Loaded content store.
        target: Output file path; parent directories are created.
        include_html: Whether to add each item's rendered body.
        base_url: Prefix for asset URLs in rendered HTML.

    Returns:
        The path written.
    """
    manifest = build_manifest(store, include_html=include_html, base_url=base_url)
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(json.dumps(manifest, indent=2) + "\n", encoding="utf-8")
    logger.info("Wrote manifest with %d items to %s", len(manifest["items"]), target)
    return target
