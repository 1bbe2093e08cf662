"""Markdown helpers for Inkwell.

Inkwell does not template pages; the site assembler does. This module covers
the two things the store itself needs from a Markdown parser: finding the
asset files a body refers to, and turning a body into an HTML fragment whose
local images point next to the item rather than at a global asset root.

Key functions:
- collect_asset_references: Local image references in a Markdown body.
- render_body: Render an item's body to HTML.
"""

from __future__ import annotations

import posixpath
import re
from typing import TYPE_CHECKING

import mistune
from pygments import highlight
from pygments.formatters import HtmlFormatter
from pygments.lexers import get_lexer_by_name
from pygments.util import ClassNotFound

from .utils import clean_reference, is_local_reference

if TYPE_CHECKING:
    from .content import ContentItem

IMAGE_SRC_RE = re.compile(r'<img\s+[^>]*src="([^"]+)"', re.IGNORECASE)

MARKDOWN_PLUGINS = ["strikethrough", "footnotes", "table", "url"]

_ast_parser = mistune.create_markdown(renderer="ast", plugins=MARKDOWN_PLUGINS)


def _walk(tokens):
    for token in tokens:
        yield token
        children = token.get("children")
        if isinstance(children, list):
            yield from _walk(children)


def collect_asset_references(body: str) -> list[str]:
    """Find local asset references in a Markdown body.

    Looks at Markdown image syntax and raw HTML ``<img src>`` tags. External
    URLs, root-relative paths, data URIs and fragments are skipped.

    Args:
        body: Markdown text without front matter.

    Returns:
        Unique references in order of first appearance, with query strings,
        fragments and percent-encoding removed.
    """
    found: list[str] = []
    for token in _walk(_ast_parser(body)):
        kind = token.get("type")
        if kind == "image":
            candidates = [token.get("attrs", {}).get("url", "")]
        elif kind in ("block_html", "inline_html"):
            candidates = IMAGE_SRC_RE.findall(token.get("raw", ""))
        else:
            continue
        for ref in candidates:
            if not is_local_reference(ref):
                continue
            cleaned = clean_reference(ref)
            if cleaned and cleaned not in found:
                found.append(cleaned)
    return found


def asset_url(src: str, folder: str, base_url: str = "") -> str:
    """Rewrite a local reference to a URL next to the item's source file.

    Args:
        src: Reference as written in the body.
        folder: Item folder relative to the content directory.
        base_url: Optional prefix such as a site root URL.

    Returns:
        Rewritten URL; non-local references are returned unchanged.
    """
    if not is_local_reference(src):
        return src
    joined = posixpath.normpath(posixpath.join("/", folder, src))
    return f"{base_url.rstrip('/')}{joined}"


class _ItemRenderer(mistune.HTMLRenderer):
    """Markdown renderer with item-relative images and syntax highlighting.

    Attributes:
        folder: Folder of the item being rendered.
        base_url: Prefix for rewritten asset URLs.
    """

    def __init__(self, folder: str, base_url: str = ""):
        super().__init__(escape=False)
        self.folder = folder
        self.base_url = base_url

    def image(self, text: str, url: str | None = None, title: str | None = None):
        src = asset_url(url or "", self.folder, self.base_url)
        return super().image(text, src, title)

    def block_code(self, code: str, info: str | None = None) -> str:
        """Render a code block with Pygments syntax highlighting.

        Args:
            code: The code content.
            info: Language identifier (e.g., 'python', 'javascript').

        Returns:
            HTML string with highlighted code.
        """
        lang = info.split()[0] if info and info.strip() else None
        if lang:
            try:
                lexer = get_lexer_by_name(lang, stripall=True)
            except ClassNotFound:
                lexer = None
            if lexer is not None:
                formatter = HtmlFormatter(nowrap=False, cssclass="highlight")
                return highlight(code, lexer, formatter)
        escaped = code.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")
        lang_class = f' class="language-{lang}"' if lang else ""
        return f"<pre><code{lang_class}>{escaped}</code></pre>\n"


def render_body(item: ContentItem, base_url: str = "") -> str:
    """Render an item's Markdown body to an HTML fragment.

    Args:
        item: Content item to render.
        base_url: Optional prefix for rewritten asset URLs.

    Returns:
        HTML string.
    """
    renderer = _ItemRenderer(item.folder, base_url)
    markdown = mistune.create_markdown(renderer=renderer, plugins=MARKDOWN_PLUGINS)
    html = markdown(item.body)

    def repl(match: re.Match) -> str:
        src = match.group(1)
        return match.group(0).replace(src, asset_url(src, item.folder, base_url))

    return IMAGE_SRC_RE.sub(repl, html)
