"""Front matter parsing for Inkwell.

Content files may open with either of two fenced metadata blocks:

    ---                 +++
    title: YAML         title = "TOML"
    ---                 +++

The style is picked per file. A registry holds one parser per delimiter and
asks each in turn whether it recognises the opening fence, so new content is
never forced into a single convention.

Key classes:
- YamlFrontmatterParser: ``---`` blocks, parsed with PyYAML.
- TomlFrontmatterParser: ``+++`` blocks, parsed with tomllib.
- FrontmatterParserRegistry: Capability-based parser selection.
"""

from __future__ import annotations

import re
import tomllib
from datetime import time
from pathlib import Path
from typing import Any

import yaml

from .errors import MalformedMetadata
from .protocols import FrontmatterParser

TIME_TAG = "!time"


class _FrontmatterLoader(yaml.SafeLoader):
    """SafeLoader that also reads ``!time`` scalars back as datetime.time."""


class _FrontmatterDumper(yaml.SafeDumper):
    """SafeDumper that can write the local times TOML front matter yields."""


def _construct_time(loader: yaml.SafeLoader, node: yaml.Node) -> time:
    return time.fromisoformat(loader.construct_scalar(node))


def _represent_time(dumper: yaml.SafeDumper, value: time) -> yaml.Node:
    return dumper.represent_scalar(TIME_TAG, value.isoformat())


_FrontmatterLoader.add_constructor(TIME_TAG, _construct_time)
_FrontmatterDumper.add_representer(time, _represent_time)


class _FencedParser:
    """Shared fence handling for delimiter-based parsers."""

    _delimiter = ""

    def __init__(self):
        fence = re.escape(self._delimiter)
        self._open_re = re.compile(rf"\A\ufeff?{fence}[ \t]*\r?\n")
        self._close_re = re.compile(rf"^{fence}[ \t]*(?:\r?\n|\Z)", re.MULTILINE)

    @property
    def delimiter(self) -> str:
        return self._delimiter

    def can_parse(self, text: str) -> bool:
        return self._open_re.match(text) is not None

    def _split(self, text: str, source: Path) -> tuple[str, str]:
        opening = self._open_re.match(text)
        if opening is None:
            raise MalformedMetadata(source, f"expected opening '{self._delimiter}' fence")
        closing = self._close_re.search(text, opening.end())
        if closing is None:
            raise MalformedMetadata(
                source, f"unterminated front matter: no closing '{self._delimiter}' fence"
            )
        block = text[opening.end() : closing.start()]
        body = text[closing.end() :]
        return block, body

    def _check_mapping(self, data: Any, source: Path) -> dict[str, Any]:
        if data is None:
            return {}
        if not isinstance(data, dict):
            raise MalformedMetadata(
                source,
                f"front matter must be a key/value mapping, got {type(data).__name__}",
            )
        return data


class YamlFrontmatterParser(_FencedParser):
    """Parses ``---`` fenced YAML front matter."""

    _delimiter = "---"

    def parse(self, text: str, source: Path) -> tuple[dict[str, Any], str]:
        block, body = self._split(text, source)
        try:
            data = yaml.load(block, Loader=_FrontmatterLoader)
        # PyYAML raises ValueError for calendar-invalid dates like 2024-02-30
        except (yaml.YAMLError, ValueError) as exc:
            raise MalformedMetadata(source, f"invalid YAML front matter: {exc}", exc) from exc
        return self._check_mapping(data, source), body


class TomlFrontmatterParser(_FencedParser):
    """Parses ``+++`` fenced TOML front matter."""

    _delimiter = "+++"

    def parse(self, text: str, source: Path) -> tuple[dict[str, Any], str]:
        block, body = self._split(text, source)
        try:
            data = tomllib.loads(block)
        except tomllib.TOMLDecodeError as exc:
            raise MalformedMetadata(source, f"invalid TOML front matter: {exc}", exc) from exc
        return self._check_mapping(data, source), body


class FrontmatterParserRegistry:
    """Registry of front matter parsers.

    Parsers are tried in registration order; the first whose fence matches
    the start of the file parses it.
    """

    def __init__(self, parsers: list[FrontmatterParser] | None = None):
        """Initialize the registry.

        Args:
            parsers: FrontmatterParser implementations. If None, registers
                the YAML and TOML parsers.
        """
        if parsers is None:
            self._parsers = [YamlFrontmatterParser(), TomlFrontmatterParser()]
        else:
            self._parsers = list(parsers)

    def register(self, parser: FrontmatterParser) -> None:
        """Register a new parser.

        Args:
            parser: A FrontmatterParser implementation.
        """
        self._parsers.append(parser)

    @property
    def delimiters(self) -> list[str]:
        return [parser.delimiter for parser in self._parsers]

    def get_parser(self, text: str) -> FrontmatterParser | None:
        """Get the parser whose fence opens the text.

        Args:
            text: Raw file content.

        Returns:
            The first parser that recognises the text, or None.
        """
        for parser in self._parsers:
            if parser.can_parse(text):
                return parser
        return None

    def split(self, text: str, source: Path) -> tuple[dict[str, Any], str, str | None]:
        """Split a file into front matter and body.

        Args:
            text: Raw file content.
            source: Path to the file, for error attribution.

        Returns:
            Tuple of (metadata, body, delimiter). Files without a recognised
            opening fence have empty metadata, the whole text as body and a
            delimiter of None.

        Raises:
            MalformedMetadata: If a recognised block cannot be parsed.
        """
        parser = self.get_parser(text)
        if parser is None:
            return {}, text, None
        metadata, body = parser.parse(text, source)
        return metadata, body, parser.delimiter


default_parser_registry = FrontmatterParserRegistry()


def split_frontmatter(text: str, source: Path) -> tuple[dict[str, Any], str, str | None]:
    """Split a file into front matter and body using the default registry."""
    return default_parser_registry.split(text, source)


def dump_frontmatter(metadata: dict[str, Any]) -> str:
    """Serialize metadata to a ``---`` fenced YAML block.

    TOML is read only here; items loaded from ``+++`` blocks are written
    back out as YAML with the same values. TOML local times have no YAML
    scalar form, so they are written as ``!time 'HH:MM:SS'``.

    Args:
        metadata: Front matter mapping.

    Returns:
        Fenced block ending in a newline.
    """
    if not metadata:
        return "---\n---\n"
    block = yaml.dump(
        metadata,
        Dumper=_FrontmatterDumper,
        sort_keys=False,
        allow_unicode=True,
        default_flow_style=False,
    )
    return f"---\n{block}---\n"


def render_document(metadata: dict[str, Any], body: str) -> str:
    """Join a front matter block and a body into file content.

    Args:
        metadata: Front matter mapping.
        body: Markdown body.

    Returns:
        Complete file content.
    """
    return dump_frontmatter(metadata) + body
