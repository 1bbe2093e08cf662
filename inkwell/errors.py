"""Error types for Inkwell.

Every error carries the file it is about so the caller can point the author
at the content that needs fixing. Nothing here is retried: a failed load
needs a content fix and a re-run.
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path


class ContentError(Exception):
    """Error while loading content, with file context.

    Attributes:
        source_path: Path to the content file that caused the error.
        message: Human-readable error message.
    """

    def __init__(self, source_path: Path | None, message: str):
        self.source_path = source_path
        self.message = message
        if source_path is None:
            super().__init__(message)
        else:
            super().__init__(f"{source_path}: {message}")


class ConfigError(ContentError):
    """The project configuration file could not be used."""


class MalformedMetadata(ContentError):
    """A content file's front matter block cannot be parsed or validated.

    Attributes:
        original_error: The parser exception that was caught, if any.
    """

    def __init__(
        self,
        source_path: Path,
        message: str,
        original_error: Exception | None = None,
    ):
        self.original_error = original_error
        super().__init__(source_path, message)


class DuplicatePath(ContentError):
    """Two content files resolve to the same item path.

    Attributes:
        path: The item path both files claim.
        first: The file that was loaded first.
        second: The file that collided with it.
    """

    def __init__(self, path: str, first: Path, second: Path):
        self.path = path
        self.first = first
        self.second = second
        super().__init__(
            second,
            f"duplicate content path '{path}' (also defined by {first})",
        )


class MissingAsset(ContentError):
    """A body references an asset file that does not exist.

    Usually reported as a warning value rather than raised; see
    ContentStore.warnings and StrictModeError.

    Attributes:
        reference: The reference as written in the body.
        resolved: The filesystem path that was checked.
    """

    def __init__(self, source_path: Path, reference: str, resolved: Path):
        self.reference = reference
        self.resolved = resolved
        super().__init__(source_path, f"missing asset '{reference}' ({resolved})")


class StrictModeError(ContentError):
    """Missing assets were found while strict mode is on.

    Attributes:
        missing: Every MissingAsset found during the load.
    """

    def __init__(self, missing: Sequence[MissingAsset]):
        self.missing = list(missing)
        lines = [str(item) for item in self.missing]
        super().__init__(
            None,
            f"{len(self.missing)} missing asset(s) in strict mode:\n  "
            + "\n  ".join(lines),
        )


class ItemNotFound(ContentError, KeyError):
    """No content item has the requested path."""

    def __init__(self, path: str):
        self.path = path
        ContentError.__init__(self, None, f"no content item with path '{path}'")

    def __str__(self) -> str:
        return self.message
