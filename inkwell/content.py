"""Content loading for Inkwell.

This module discovers content files, parses their front matter and turns each
one into a validated ContentItem.

Key classes:
- ContentItem: Frozen dataclass representing one post or page.
- MenuPlacement: (menu, weight) pair controlling navigation order.
- FileContentLoader: Implementation of ContentLoader for a directory tree.
- PathDeriver: Computes the unique item path for a file.
- MetadataNormalizer: Validates and coerces front matter values.
- DefaultItemBuilder: Implementation of ItemBuilder.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Any

from .errors import MalformedMetadata
from .frontmatter import FrontmatterParserRegistry, default_parser_registry
from .renderers import collect_asset_references
from .utils import (
    DEFAULT_EXTENSIONS,
    extract_date_from_name,
    is_content_file,
    is_internal_path,
    slugify,
    titleize,
)

logger = logging.getLogger(__name__)

BUNDLE_INDEX = "index"


@dataclass(frozen=True, order=True)
class MenuPlacement:
    """Placement of an item in a named navigation menu.

    Attributes:
        menu: Menu name, e.g. "main".
        weight: Sort weight; lower comes first.
    """

    menu: str
    weight: int = 0


@dataclass(frozen=True)
class ContentItem:
    """Represents a post or page with all its metadata.

    Attributes:
        path: Unique identifier, posix style, without extension.
        title: Display title.
        date: Publication timestamp, or None for undated (evergreen) items.
        draft: Whether the item is excluded from published output.
        hidden: Whether the item is excluded from navigation menus.
        tags: Set of tag names.
        summary: Optional short description.
        menu_placement: Optional menu name and weight.
        body: Markdown body after the front matter block.
        assets: Local asset references found in the body.
        source: Path to the source file.
        folder: Directory of the source file, relative to the content root.
        delimiter: Front matter fence the file used, or None.
        metadata: Raw front matter mapping.
    """

    path: str
    title: str
    date: datetime | None
    draft: bool
    hidden: bool
    tags: frozenset[str]
    summary: str | None
    menu_placement: MenuPlacement | None
    body: str
    source: Path
    folder: str = ""
    assets: tuple[str, ...] = ()
    delimiter: str | None = None
    metadata: Mapping[str, Any] = field(default_factory=dict, compare=False, hash=False)

    @property
    def is_bundle(self) -> bool:
        """Whether the item is a folder's index file."""
        return self.source.stem.lower() == BUNDLE_INDEX and bool(self.folder)

    @property
    def url(self) -> str:
        """Conventional URL path for the item."""
        if self.path == BUNDLE_INDEX:
            return "/"
        return f"/{self.path}/"

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-ready mapping of the item's metadata."""
        placement = self.menu_placement
        return {
            "path": self.path,
            "title": self.title,
            "date": self.date.isoformat() if self.date else None,
            "draft": self.draft,
            "hidden": self.hidden,
            "tags": sorted(self.tags),
            "summary": self.summary,
            "menu": (
                {"name": placement.menu, "weight": placement.weight} if placement else None
            ),
            "url": self.url,
            "source": self.source.as_posix(),
            "assets": list(self.assets),
        }


class FileContentLoader:
    """Loads content files from a directory.

    Only discovers files; parsing happens in the builder. Paths with a
    component starting with ``_`` or ``.`` are skipped.

    Attributes:
        content_dir: Directory containing content.
        extensions: Accepted file suffixes.
    """

    def __init__(self, content_dir: Path, extensions: Iterable[str] = DEFAULT_EXTENSIONS):
        self.content_dir = content_dir
        self.extensions = tuple(extensions)

    def iter_files(self) -> list[Path]:
        """Return all content files, sorted by relative path.

        Returns:
            List of paths to content files.
        """
        files: list[Path] = []
        for path in self.content_dir.rglob("*"):
            if path.is_dir():
                continue
            rel = path.relative_to(self.content_dir)
            if is_internal_path(rel):
                continue
            if is_content_file(path, self.extensions):
                files.append(path)
        files.sort(key=lambda p: p.relative_to(self.content_dir).as_posix())
        return files


class PathDeriver:
    """Derives the unique item path for a content file.

    Rules:
    - Segments are slugified and the file name loses its date prefix.
    - ``index.md`` in a folder takes the folder's path (page bundle).
    - A front matter ``slug`` replaces the last segment.
    """

    def derive(self, rel: Path, slug: str | None = None) -> str:
        """Derive the path for a file.

        Args:
            rel: File path relative to the content directory.
            slug: Optional front matter slug override.

        Returns:
            Posix style item path.
        """
        segments = [slugify(part) for part in rel.parent.parts]
        stem = rel.stem
        if stem.lower() != BUNDLE_INDEX or not segments:
            segments.append(slugify(stem))
        if slug:
            overridden = slugify(slug)
            if segments:
                segments[-1] = overridden
            else:
                segments = [overridden]
        return "/".join(segments)


class MetadataNormalizer:
    """Validates front matter values and coerces them to ContentItem types.

    Every method raises MalformedMetadata naming the file and the key when a
    value has the wrong shape.
    """

    def __init__(self, source: Path):
        self.source = source

    def _fail(self, key: str, message: str) -> MalformedMetadata:
        return MalformedMetadata(self.source, f"'{key}': {message}")

    def string(self, metadata: Mapping[str, Any], key: str) -> str | None:
        value = metadata.get(key)
        if value is None:
            return None
        if isinstance(value, (str, int, float)) and not isinstance(value, bool):
            text = str(value).strip()
            return text or None
        raise self._fail(key, f"expected a string, got {type(value).__name__}")

    def flag(self, metadata: Mapping[str, Any], key: str) -> bool:
        value = metadata.get(key, False)
        if value is None:
            return False
        if not isinstance(value, bool):
            raise self._fail(key, f"expected true or false, got {value!r}")
        return value

    def timestamp(self, metadata: Mapping[str, Any], key: str) -> datetime | None:
        """Coerce a date value to a naive datetime.

        Accepts native YAML/TOML dates and datetimes and ISO 8601 strings.
        Aware datetimes are converted to UTC and made naive so that every
        item date is comparable.
        """
        value = metadata.get(key)
        if value is None or value == "":
            return None
        if isinstance(value, datetime):
            parsed = value
        elif isinstance(value, date):
            parsed = datetime(value.year, value.month, value.day)
        elif isinstance(value, str):
            text = value.strip()
            if text.endswith("Z"):
                text = text[:-1] + "+00:00"
            try:
                parsed = datetime.fromisoformat(text)
            except ValueError as exc:
                raise MalformedMetadata(
                    self.source, f"'{key}': invalid date {value!r}", exc
                ) from exc
        else:
            raise self._fail(key, f"expected a date, got {type(value).__name__}")
        if parsed.tzinfo is not None:
            parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
        return parsed

    def tags(self, metadata: Mapping[str, Any], key: str) -> frozenset[str]:
        value = metadata.get(key)
        if value is None:
            return frozenset()
        if isinstance(value, str):
            items = value.split(",")
        elif isinstance(value, (list, tuple)):
            items = []
            for entry in value:
                if not isinstance(entry, (str, int, float)) or isinstance(entry, bool):
                    raise self._fail(key, f"tags must be strings, got {entry!r}")
                items.append(str(entry))
        else:
            raise self._fail(key, f"expected a list of tags, got {type(value).__name__}")
        return frozenset(tag.strip() for tag in items if tag.strip())

    def weight(self, value: Any, key: str) -> int:
        if value is None:
            return 0
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise self._fail(key, f"expected a number, got {value!r}")
        if isinstance(value, float) and not value.is_integer():
            raise self._fail(key, f"expected a whole number, got {value!r}")
        return int(value)

    def menu(self, metadata: Mapping[str, Any]) -> MenuPlacement | None:
        """Parse the menu placement.

        Accepted forms::

            menu: main
            menu: [main]
            menu:
              main:
                weight: 10

        A top-level ``weight`` applies when the menu form has none.
        """
        value = metadata.get("menu")
        if value is None:
            return None
        default_weight = self.weight(metadata.get("weight"), "weight")
        if isinstance(value, list):
            if len(value) != 1:
                raise self._fail("menu", "only one menu placement is supported")
            value = value[0]
        if isinstance(value, str):
            name = value.strip()
            if not name:
                raise self._fail("menu", "menu name is empty")
            return MenuPlacement(name, default_weight)
        if isinstance(value, dict):
            if len(value) != 1:
                raise self._fail("menu", "only one menu placement is supported")
            ((name, options),) = value.items()
            if not isinstance(name, str) or not name.strip():
                raise self._fail("menu", f"invalid menu name {name!r}")
            if options is None:
                return MenuPlacement(name.strip(), default_weight)
            if not isinstance(options, dict):
                raise self._fail("menu", f"menu options must be a mapping, got {options!r}")
            weight = (
                self.weight(options["weight"], "menu.weight")
                if "weight" in options
                else default_weight
            )
            return MenuPlacement(name.strip(), weight)
        raise self._fail("menu", f"unsupported menu value {value!r}")


class DefaultItemBuilder:
    """Builds ContentItem objects from source files.

    Attributes:
        content_dir: Directory containing content.
        parser_registry: Front matter parser registry.
        path_deriver: Item path deriver.
    """

    def __init__(
        self,
        content_dir: Path,
        parser_registry: FrontmatterParserRegistry | None = None,
    ):
        self.content_dir = content_dir
        self.parser_registry = parser_registry or default_parser_registry
        self.path_deriver = PathDeriver()

    def build(self, path: Path) -> ContentItem:
        """Build a ContentItem from a source file.

        Args:
            path: Path to the source file.

        Returns:
            ContentItem object.

        Raises:
            MalformedMetadata: If the front matter is unparsable or invalid.
        """
        rel = path.relative_to(self.content_dir)
        folder = rel.parent.as_posix() if rel.parent != Path(".") else ""
        try:
            raw = path.read_text(encoding="utf-8")
        except UnicodeDecodeError as exc:
            raise MalformedMetadata(path, "file is not valid UTF-8", exc) from exc
        except OSError as exc:
            raise MalformedMetadata(path, f"cannot read file: {exc.strerror or exc}", exc) from exc

        metadata, body, delimiter = self.parser_registry.split(raw, path)
        norm = MetadataNormalizer(path)

        title = norm.string(metadata, "title") or self._title_from_body(body) or titleize(path.name)
        item_date = norm.timestamp(metadata, "date")
        if item_date is None and "date" not in metadata:
            item_date = extract_date_from_name(path.stem)
        summary = norm.string(metadata, "summary") or norm.string(metadata, "description")

        item = ContentItem(
            path=self.path_deriver.derive(rel, norm.string(metadata, "slug")),
            title=title,
            date=item_date,
            draft=norm.flag(metadata, "draft"),
            hidden=norm.flag(metadata, "hidden"),
            tags=norm.tags(metadata, "tags"),
            summary=summary,
            menu_placement=norm.menu(metadata),
            body=body,
            source=path,
            folder=folder,
            assets=tuple(collect_asset_references(body)),
            delimiter=delimiter,
            metadata=metadata,
        )
        logger.debug("Loaded %s as '%s'", rel.as_posix(), item.path)
        return item

    def _title_from_body(self, body: str) -> str | None:
        for line in body.splitlines():
            stripped = line.strip()
            if stripped.startswith("# "):
                return stripped.lstrip("# ").strip() or None
        return None
