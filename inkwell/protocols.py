"""Protocol definitions for Inkwell.

This module defines the interfaces (protocols) the store is assembled from,
so parsers, loaders and builders can be swapped in tests or extended for
new content conventions without modifying existing code.
"""

from __future__ import annotations

from abc import abstractmethod
from pathlib import Path
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from .content import ContentItem


@runtime_checkable
class FrontmatterParser(Protocol):
    """Protocol for parsing one front matter style.

    Each implementation owns a single delimiter (``---``, ``+++``) and the
    data format that goes with it.
    """

    @property
    @abstractmethod
    def delimiter(self) -> str:
        """Return the fence line that opens and closes the block."""
        ...

    @abstractmethod
    def can_parse(self, text: str) -> bool:
        """Check whether the text opens with this parser's fence.

        Args:
            text: Raw file content.

        Returns:
            True if this parser should handle the file.
        """
        ...

    @abstractmethod
    def parse(self, text: str, source: Path) -> tuple[dict[str, Any], str]:
        """Parse the fenced block.

        Args:
            text: Raw file content.
            source: Path to the file, for error attribution.

        Returns:
            Tuple of (metadata mapping, body text).

        Raises:
            MalformedMetadata: If the block is unterminated or unparsable.
        """
        ...


@runtime_checkable
class ContentLoader(Protocol):
    """Protocol for discovering content files."""

    @abstractmethod
    def iter_files(self) -> list[Path]:
        """Return every content file, in a deterministic order."""
        ...


@runtime_checkable
class ItemBuilder(Protocol):
    """Protocol for building ContentItem objects from files."""

    @abstractmethod
    def build(self, path: Path) -> ContentItem:
        """Build a ContentItem from a source file.

        Args:
            path: Path to the source file.

        Returns:
            ContentItem object.
        """
        ...
