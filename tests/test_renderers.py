"""Tests for Markdown asset collection and body rendering."""

from pathlib import Path

from inkwell.content import ContentItem
from inkwell.renderers import asset_url, collect_asset_references, render_body


def make_item(body: str, folder: str = "posts/trip") -> ContentItem:
    return ContentItem(
        path=folder or "index",
        title="Trip",
        date=None,
        draft=False,
        hidden=False,
        tags=frozenset(),
        summary=None,
        menu_placement=None,
        body=body,
        source=Path("content") / folder / "index.md",
        folder=folder,
    )


def test_collects_markdown_and_html_images():
    body = (
        "# Title\n\n"
        "![Shot](shot.png) and ![Again](shot.png)\n\n"
        '<img src="diagram.svg" alt="d">\n\n'
        'Inline <img src="inline.gif"> image.\n\n'
        "- ![Nested](images/nested.jpg?raw=1)\n\n"
        "![Remote](https://example.com/x.png)\n"
        "![Root](/static/logo.png)\n"
        "[Not an image](notes.pdf)\n"
    )
    assert collect_asset_references(body) == [
        "shot.png",
        "diagram.svg",
        "inline.gif",
        "images/nested.jpg",
    ]


def test_collects_nothing_from_plain_text():
    assert collect_asset_references("Just words.\n\n```\n![not](code.png)\n```\n") == []


def test_asset_url_is_item_relative():
    assert asset_url("map.png", "posts/trip") == "/posts/trip/map.png"
    assert asset_url("../shared/x.png", "posts/trip") == "/posts/shared/x.png"
    assert asset_url("logo.png", "") == "/logo.png"
    assert asset_url("map.png", "posts", "https://blog.example/") == "https://blog.example/posts/map.png"
    assert asset_url("https://cdn.example/x.png", "posts") == "https://cdn.example/x.png"
    assert asset_url("/static/x.png", "posts") == "/static/x.png"


def test_render_body_rewrites_images():
    html = render_body(make_item('![Map](map.png)\n\n<img src="photo.jpg">\n'))
    assert 'src="/posts/trip/map.png"' in html
    assert 'src="/posts/trip/photo.jpg"' in html

    prefixed = render_body(make_item("![Map](map.png)\n"), base_url="https://blog.example")
    assert 'src="https://blog.example/posts/trip/map.png"' in prefixed

    remote = render_body(make_item("![Remote](https://example.com/x.png)\n"))
    assert 'src="https://example.com/x.png"' in remote


def test_render_body_highlights_code():
    html = render_body(make_item("```python\nprint('hi')\n```\n"))
    assert 'class="highlight"' in html

    unknown = render_body(make_item("```nosuchlang\n<b>x</b>\n```\n"))
    assert 'class="language-nosuchlang"' in unknown
    assert "&lt;b&gt;" in unknown

    plain = render_body(make_item("```\na < b\n```\n"))
    assert "<pre><code>a &lt; b" in plain


def test_render_body_plugins():
    html = render_body(make_item("| a | b |\n|---|---|\n| 1 | 2 |\n\n~~gone~~\n"))
    assert "<table>" in html
    assert "<del>gone</del>" in html
