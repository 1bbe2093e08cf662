"""Inkwell content store.

This package loads a Markdown blog's content tree (posts and standalone
pages with YAML or TOML front matter), validates it, and exposes ordered
listings, navigation menus, single-item lookup and asset access to an
external static site assembler.

The main entry points are ContentStore.load for library use and the CLI
module for checking, listing and exporting content from a shell.
"""

__all__ = ["__version__"]
__version__ = "0.1.0"
