"""Command-line interface for folio.

This module defines the CLI commands using the Click framework.

Commands:
- check: Validate every content collection and report failing files.
- feed: Write the projects RSS feed into the output directory.
- new: Create a new content file interactively.
"""

from __future__ import annotations

from datetime import date
from pathlib import Path
from typing import Any

import click
import questionary
import yaml

from . import __version__
from .collections import COLLECTIONS, CollectionLoadError, ContentStore, find_dangling_series_refs
from .config import ConfigError, load_config, resolve_path
from .content import EntryValidationError, FileContentLoader
from .feeds import FeedError, RSSGenerator, projects_rss
from .images import PillowImageResolver
from .schemas import TITLE_MAX_LENGTH
from .utils import entry_id_from_path, slugify


@click.group()
@click.version_option(version=__version__, prog_name="folio")
def cli():
    """folio content tools."""


@cli.command()
@click.option(
    "--strict-series",
    is_flag=True,
    help="Treat posts whose seriesId matches no series as errors",
)
def check(strict_series: bool):
    """Validate every content collection."""
    project_root = Path.cwd()
    config = _load_config(project_root)
    store = _make_store(project_root, config)

    results = store.load_all()
    failed = False
    for result in results.values():
        for error in result.errors:
            failed = True
            _report_entry_error(project_root, error)

    dangling = find_dangling_series_refs(
        store.get_collection("post"), store.get_collection("series")
    )
    for post in dangling:
        label = "Error" if strict_series else "Warning"
        color = "red" if strict_series else "yellow"
        click.echo(
            click.style(f"{label}: ", fg=color, bold=True)
            + f"{_display_path(project_root, post.path)} references unknown series "
            f"'{post.data.series_id}'",
            err=True,
        )
    if strict_series and dangling:
        failed = True

    if failed:
        raise SystemExit(1)
    total = sum(len(result.entries) for result in results.values())
    click.echo(f"Validated {total} entries in {len(results)} collections")


@cli.command()
@click.option("--site", required=False, help="Base site URL (overrides folio.yaml site)")
@click.option(
    "--output",
    type=click.Path(file_okay=False, path_type=Path),
    required=False,
    help="Output directory (overrides folio.yaml output_dir)",
)
def feed(site: str | None, output: Path | None):
    """Write the projects RSS feed."""
    project_root = Path.cwd()
    config = _load_config(project_root)
    store = _make_store(project_root, config)
    site_url = site or str(config.get("site") or "")
    output_dir = output or resolve_path(project_root, config, "output_dir")

    try:
        response = projects_rss(store, site_url)
    except CollectionLoadError as exc:
        for error in exc.errors:
            _report_entry_error(project_root, error)
        raise SystemExit(1) from None
    except FeedError as exc:
        raise click.ClickException(str(exc)) from exc

    target = output_dir / RSSGenerator("projects").filename
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(response.body, encoding="utf-8")
    click.echo(f"Wrote {target}")


@cli.command()
def new():
    """Create a new content file interactively."""
    project_root = Path.cwd()
    config = _load_config(project_root)
    content_dir = resolve_path(project_root, config, "content_dir")

    name = questionary.select(
        "Select collection:",
        choices=list(COLLECTIONS),
        style=_questionary_style(),
    ).ask()
    if name is None:
        raise click.Abort()
    definition = COLLECTIONS[name]

    filename = questionary.text(
        "Filename (without .md extension):",
        validate=lambda x: len(x.strip()) > 0 or "Filename cannot be empty",
        style=_questionary_style(),
    ).ask()
    if filename is None:
        raise click.Abort()
    filename = filename.strip()

    title = questionary.text(
        "Title:",
        validate=lambda x: _validate_title(name, x),
        style=_questionary_style(),
    ).ask()
    if title is None:
        raise click.Abort()

    target_dir = content_dir / definition.base
    target_path = target_dir / f"{filename}.md"
    if target_path.exists():
        raise click.ClickException(
            f"File already exists: {_display_path(project_root, target_path)}"
        )

    entry_id = entry_id_from_path(Path(f"{filename}.md"))
    for existing in FileContentLoader(target_dir, definition.patterns).iter_files():
        if entry_id_from_path(existing.relative_to(target_dir)) == entry_id:
            raise click.ClickException(
                f"An entry with id '{entry_id}' already exists: {existing.name}"
            )

    target_path.parent.mkdir(parents=True, exist_ok=True)
    target_path.write_text(
        _frontmatter_skeleton(name, title.strip(), filename), encoding="utf-8"
    )
    click.echo(f"Created {_display_path(project_root, target_path)}")


def _validate_title(collection: str, value: str) -> bool | str:
    text = value.strip()
    if not text:
        return "Title cannot be empty"
    if collection != "series" and len(text) > TITLE_MAX_LENGTH:
        return f"Title must be at most {TITLE_MAX_LENGTH} characters"
    return True


def _frontmatter_skeleton(collection: str, title: str, filename: str) -> str:
    """Return the initial file content for a new entry."""
    data: dict[str, Any]
    if collection == "series":
        data = {
            "id": slugify(Path(filename).name),
            "title": title,
            "description": "",
            "featured": False,
        }
    else:
        data = {
            "title": title,
            "description": "",
            "publishDate": date.today(),
            "tags": [],
            "draft": True,
        }
    dumped = yaml.safe_dump(data, sort_keys=False, allow_unicode=True)
    return f"---\n{dumped}---\n\n"


def _load_config(project_root: Path) -> dict[str, Any]:
    try:
        return load_config(project_root)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc


def _make_store(project_root: Path, config: dict[str, Any]) -> ContentStore:
    resolver = PillowImageResolver(resolve_path(project_root, config, "image_root"))
    return ContentStore(resolve_path(project_root, config, "content_dir"), resolver)


def _display_path(project_root: Path, path: Path) -> Path:
    try:
        return path.relative_to(project_root)
    except ValueError:
        return path


def _report_entry_error(project_root: Path, error: EntryValidationError) -> None:
    """Print one rejected file and its field errors to stderr."""
    rel_path = _display_path(project_root, error.source_path)
    click.echo(click.style("Invalid entry:", fg="red", bold=True), err=True)
    click.echo(click.style(f"  File: {rel_path}", fg="yellow"), err=True)
    for field_error in error.field_errors:
        click.echo(click.style(f"  Error: {field_error}", fg="white"), err=True)


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
