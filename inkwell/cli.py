"""Command-line interface for Inkwell.

This module defines the CLI commands using Click framework.

Commands:
- check: Load and validate the content store.
- list: List items, optionally filtered by tag or menu.
- show: Show one item's metadata.
- menu: Show a navigation menu in order.
- export: Write the JSON manifest for the site assembler.
- new: Create a new draft post interactively.
"""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path

import click
import questionary

from . import __version__
from .collections import has_tag, in_menu, not_hidden
from .config import content_dir_for, load_config
from .content import ContentItem
from .errors import ContentError, DuplicatePath, StrictModeError
from .frontmatter import render_document
from .store import ContentStore
from .utils import slugify


class _Context:
    def __init__(self, project_root: Path, content_dir: Path | None):
        self.project_root = project_root
        self.config = load_config(project_root)
        self.content_dir = content_dir or content_dir_for(project_root, self.config)

    def load(self, strict: bool | None = None) -> ContentStore:
        config = dict(self.config)
        if strict is not None:
            config["strict"] = strict
        return ContentStore.load(self.content_dir, config)


pass_context = click.make_pass_decorator(_Context)


@click.group()
@click.version_option(version=__version__, prog_name="inkwell")
@click.option(
    "--content-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Content directory (overrides inkwell.yaml content_dir)",
)
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, content_dir: Path | None, verbose: bool):
    """Inkwell content store for Markdown blogs."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.ERROR,
        format="%(levelname)s %(name)s: %(message)s",
    )
    try:
        ctx.obj = _Context(Path.cwd(), content_dir)
    except ContentError as exc:
        _report(exc)


def _report(exc: ContentError) -> None:
    """Print a content error with file attribution and exit with status 1."""
    click.echo(click.style("Content error:", fg="red", bold=True), err=True)
    if isinstance(exc, DuplicatePath):
        click.echo(click.style(f"  File: {exc.first}", fg="yellow"), err=True)
        click.echo(click.style(f"  File: {exc.second}", fg="yellow"), err=True)
        click.echo(click.style(f"  Error: duplicate path '{exc.path}'", fg="white"), err=True)
    elif isinstance(exc, StrictModeError):
        for missing in exc.missing:
            click.echo(click.style(f"  File: {missing.source_path}", fg="yellow"), err=True)
            click.echo(click.style(f"  Error: {missing.message}", fg="white"), err=True)
    else:
        if exc.source_path is not None:
            click.echo(click.style(f"  File: {exc.source_path}", fg="yellow"), err=True)
        click.echo(click.style(f"  Error: {exc.message}", fg="white"), err=True)
    raise SystemExit(1)


def _load(obj: _Context, strict: bool | None = None) -> ContentStore:
    try:
        return obj.load(strict)
    except ContentError as exc:
        _report(exc)
    except FileNotFoundError as exc:
        raise click.ClickException(str(exc)) from exc


def _line(item: ContentItem) -> str:
    stamp = item.date.strftime("%Y-%m-%d") if item.date else "----------"
    flags = []
    if item.draft:
        flags.append("draft")
    if item.hidden:
        flags.append("hidden")
    suffix = f"  [{', '.join(flags)}]" if flags else ""
    return f"{stamp}  {item.path:<32}  {item.title}{suffix}"


@cli.command()
@click.option("--strict/--no-strict", default=None, help="Treat missing assets as errors")
@pass_context
def check(obj: _Context, strict: bool | None):
    """Load and validate every content file."""
    store = _load(obj, strict)
    for warning in store.warnings:
        click.echo(click.style("warning: ", fg="yellow") + str(warning), err=True)
    drafts = len(store.all().drafts())
    click.echo(f"{len(store)} items OK ({drafts} drafts, {len(store.warnings)} warnings)")


@cli.command(name="list")
@click.option("--tag", help="Only items with this tag")
@click.option("--menu", "menu_name", help="Only items placed in this menu")
@click.option("--drafts", is_flag=True, help="Include draft content")
@click.option("--hidden/--no-hidden", default=True, help="Include hidden items")
@pass_context
def list_items(obj: _Context, tag: str | None, menu_name: str | None, drafts: bool, hidden: bool):
    """List content items in listing order."""
    store = _load(obj)
    items = store.list(include_drafts=drafts)
    if tag:
        items = items.filter(has_tag(tag))
    if menu_name:
        items = items.filter(in_menu(menu_name))
    if not hidden:
        items = items.filter(not_hidden)
    for item in items:
        click.echo(_line(item))


@cli.command()
@click.argument("path")
@pass_context
def show(obj: _Context, path: str):
    """Show one item's metadata."""
    store = _load(obj)
    try:
        item = store.get(path)
    except KeyError as exc:
        raise click.ClickException(str(exc)) from exc
    for key, value in item.to_dict().items():
        if isinstance(value, list):
            value = ", ".join(value)
        elif isinstance(value, dict):
            value = f"{value['name']} (weight {value['weight']})"
        click.echo(f"{key:>8}: {'' if value is None else value}")


@cli.command()
@click.argument("name", required=False)
@pass_context
def menu(obj: _Context, name: str | None):
    """Show a navigation menu in order."""
    store = _load(obj)
    menu_name = name or obj.config["default_menu"]
    items = store.menu(menu_name)
    if not items:
        click.echo(f"Menu '{menu_name}' is empty")
        return
    for item in items:
        click.echo(f"{item.menu_placement.weight:>4}  {item.title}  ({item.url})")


@cli.command()
@click.argument("output", type=click.Path(dir_okay=False, path_type=Path))
@click.option("--html", "include_html", is_flag=True, help="Include rendered body HTML")
@click.option("--base-url", default="", help="Prefix for asset URLs in rendered HTML")
@click.option("--strict/--no-strict", default=None, help="Treat missing assets as errors")
@pass_context
def export(obj: _Context, output: Path, include_html: bool, base_url: str, strict: bool | None):
    """Write the JSON manifest for the site assembler."""
    from .manifest import write_manifest

    store = _load(obj, strict)
    target = write_manifest(store, output, include_html=include_html, base_url=base_url)
    click.echo(f"Exported {len(store.list())} items to {target}")


@cli.command()
@click.option("--title", help="Post title")
@click.option("--folder", help="Folder under the content directory ('.' for the root)")
@click.option("--date/--no-date", "add_date", default=None, help="Prefix the filename with today's date")
@pass_context
def new(obj: _Context, title: str | None, folder: str | None, add_date: bool | None):
    """Create a new draft post interactively."""
    content_dir = obj.content_dir
    if not content_dir.exists():
        raise click.ClickException(
            f"No content directory at {content_dir}. Run this command from the project root."
        )

    if folder is None:
        folder = questionary.select(
            "Select folder:",
            choices=_get_content_folders(content_dir),
            style=_questionary_style(),
        ).ask()
        if folder is None:
            raise click.Abort()
    target_dir = content_dir if folder in (".", ". (root)") else content_dir / folder

    if title is None:
        title = questionary.text(
            "Title:",
            validate=lambda x: len(x.strip()) > 0 or "Title cannot be empty",
            style=_questionary_style(),
        ).ask()
        if title is None:
            raise click.Abort()
    title = title.strip()

    if add_date is None:
        add_date = questionary.confirm(
            "Prefix with today's date? (YYYY-MM-DD-)",
            default=True,
            style=_questionary_style(),
        ).ask()
        if add_date is None:
            raise click.Abort()

    today = datetime.now()
    slug = slugify(title)
    filename = f"{today:%Y-%m-%d}-{slug}.md" if add_date else f"{slug}.md"
    target_path = target_dir / filename
    if target_path.exists():
        raise click.ClickException(f"File already exists: {target_path}")

    # Refuse slug collisions before the store would reject them
    existing = {slugify(f.stem) for f in target_dir.glob("*.md")} if target_dir.exists() else set()
    if slug in existing:
        raise click.ClickException(f"A file with slug '{slug}' already exists in {target_dir}")

    metadata = {"title": title, "date": today.date(), "draft": True, "tags": []}
    target_dir.mkdir(parents=True, exist_ok=True)
    target_path.write_text(render_document(metadata, f"\n# {title}\n\n"), encoding="utf-8")
    click.echo(f"Created {target_path}")


def _get_content_folders(content_dir: Path) -> list[str]:
    """Get list of content folders, excluding internal ones."""
    folders = sorted(
        p.name for p in content_dir.iterdir() if p.is_dir() and not p.name.startswith(("_", "."))
    )
    folders.insert(0, ". (root)")
    return folders


def _questionary_style():
    """Return consistent questionary style."""
    return questionary.Style(
        [
            ("qmark", "fg:cyan bold"),
            ("question", "bold"),
            ("answer", "fg:cyan"),
            ("pointer", "fg:cyan bold"),
            ("highlighted", "fg:cyan bold"),
            ("selected", "fg:cyan"),
        ]
    )


def main():
    """Entry point for the CLI application."""
    cli()
