"""Utility functions for Inkwell.

This module contains the string and path helpers shared by the loader,
the store and the CLI.

Key functions:
    slugify: Convert a filename or path segment to a URL slug.
    titleize: Convert a filename to a human-readable title.
    extract_date_from_name: Extract a date from a filename prefix.
    strip_date_prefix: Drop a YYYY-MM-DD- prefix from a filename stem.
    is_content_file: Check whether a path is a loadable content file.
    is_internal_path: Check whether a path is hidden from the loader.
    is_local_reference: Check whether a body reference points at a local file.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from datetime import datetime
from pathlib import Path
from urllib.parse import unquote, urlsplit

DEFAULT_EXTENSIONS = (".md", ".markdown")


def strip_date_prefix(name: str) -> str:
    """Drop a leading YYYY-MM-DD- prefix from a filename stem.

    Args:
        name: Filename stem.

    Returns:
        The stem without its date prefix, or unchanged if it has none.

    Examples:
        >>> strip_date_prefix("2024-01-15-hello-world")
        'hello-world'
    """
    parts = name.split("-")
    if len(parts) >= 4 and all(p.isdigit() for p in parts[:3]):
        return "-".join(parts[3:])
    return name


def slugify(name: str) -> str:
    """Convert filename (without extension) to slug, dropping date prefix.

    Args:
        name: Filename stem.

    Returns:
        URL-friendly slug.
    """
    cleaned = strip_date_prefix(name)
    cleaned = re.sub(r"[^a-zA-Z0-9]+", "-", cleaned)
    cleaned = cleaned.strip("-").lower()
    return cleaned or "index"


def titleize(filename: str) -> str:
    """Convert a filename to a human-readable title.

    Removes date prefixes (YYYY-MM-DD), replaces hyphens and underscores
    with spaces, and capitalizes each word.

    Args:
        filename: Filename with or without extension.

    Returns:
        Human-readable title string.

    Examples:
        >>> titleize("2024-01-15-hello-world.md")
        'Hello World'

        >>> titleize("getting-started.md")
        'Getting Started'
    """
    base = strip_date_prefix(Path(filename).stem)
    words = re.split(r"[\s\-_]+", base)
    return " ".join(word.capitalize() for word in words if word) or "Untitled"


def extract_date_from_name(name: str) -> datetime | None:
    """Extract a date from a filename with YYYY-MM-DD prefix.

    Args:
        name: Filename stem (without extension).

    Returns:
        datetime object if a valid date prefix is found, None otherwise.

    Examples:
        >>> extract_date_from_name("2024-01-15-hello-world")
        datetime(2024, 1, 15, 0, 0)

        >>> extract_date_from_name("hello-world")
        None
    """
    parts = name.split("-")
    if len(parts) >= 3 and all(p.isdigit() for p in parts[:3]):
        try:
            return datetime(int(parts[0]), int(parts[1]), int(parts[2]))
        except ValueError:
            return None
    return None


def is_internal_path(path: Path) -> bool:
    """Check if a path is internal (contains components starting with _ or .).

    Internal paths hold partials, scratch files and editor state that the
    loader never treats as content.

    Args:
        path: Path to check, relative to the content directory.

    Returns:
        True if any path component starts with an underscore or a dot.
    """
    return any(part.startswith(("_", ".")) for part in path.parts)


def is_content_file(path: Path, extensions: Iterable[str] = DEFAULT_EXTENSIONS) -> bool:
    """Check if a path is a content file.

    Args:
        path: Path to check.
        extensions: Accepted suffixes, with leading dot.

    Returns:
        True if the suffix matches one of the extensions (case-insensitive).
    """
    accepted = {ext.lower() for ext in extensions}
    return path.suffix.lower() in accepted


def is_local_reference(ref: str) -> bool:
    """Check if a body reference points at a file next to the content item.

    Absolute URLs, protocol-relative and root-relative paths, data URIs,
    bare fragments and template expressions are not local.

    Args:
        ref: Reference as written in the body.

    Returns:
        True if the reference should resolve relative to the item.
    """
    if not ref or ref.startswith(("#", "/", "//")) or "{{" in ref:
        return False
    parsed = urlsplit(ref)
    return not parsed.scheme and not parsed.netloc


def clean_reference(ref: str) -> str:
    """Strip query, fragment and percent-encoding from a local reference.

    Args:
        ref: Reference as written in the body.

    Returns:
        Filesystem-style relative path.
    """
    parsed = urlsplit(ref)
    return unquote(parsed.path)
