"""Utility functions for folio.

String, path and date helpers shared by the content, collection and feed
modules.

Key functions:
    slugify: Convert a path segment to a URL slug.
    entry_id_from_path: Derive an entry identifier from a content file path.
    canonicalize_tags: Lower-case and de-duplicate a tag list.
    parse_date: Normalize a date, datetime or ISO 8601 string to UTC.
    escape_xml: Escape special characters for XML text and attributes.
    join_root_url: Join a base URL with a path.
    build_tags_index: Build an index of entries by tag.
    is_content_file: Check if a path is a Markdown/MDX content file.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from datetime import date, datetime, time, timezone
from pathlib import Path

CONTENT_SUFFIXES = (".md", ".mdx")

_SLUG_RE = re.compile(r"[^a-z0-9]+")

# Written forms accepted besides ISO 8601. Month names are English.
WRITTEN_DATE_FORMATS = ("%d %b %Y", "%d %B %Y", "%b %d, %Y", "%B %d, %Y")


def slugify(name: str) -> str:
    """Convert a single path segment to a slug.

    Args:
        name: Path segment, without extension.

    Returns:
        Lower-case slug with runs of other characters collapsed to hyphens.

    Examples:
        >>> slugify("My First_Post")
        'my-first-post'
    """
    cleaned = _SLUG_RE.sub("-", name.lower())
    return cleaned.strip("-") or "index"


def entry_id_from_path(rel: Path) -> str:
    """Derive an entry id from a path relative to its collection base.

    Args:
        rel: Relative path including the file extension.

    Returns:
        Slash-joined slugs of every segment, extension dropped.

    Examples:
        >>> entry_id_from_path(Path("2024/Hello World.md"))
        '2024/hello-world'
    """
    parts = list(rel.parent.parts) + [rel.stem]
    return "/".join(slugify(part) for part in parts if part not in ("", "."))


def canonicalize_tags(tags: Iterable[str]) -> list[str]:
    """Lower-case tags and drop duplicates, keeping first occurrence order.

    Examples:
        >>> canonicalize_tags(["Python", "python", "Web"])
        ['python', 'web']
    """
    return list(dict.fromkeys(tag.lower() for tag in tags))


def parse_date(value: date | datetime | str) -> datetime:
    """Normalize a date-like value to a timezone-aware UTC datetime.

    Date-only values map to midnight UTC, naive datetimes are taken as UTC
    and offset datetimes are converted to UTC.

    Args:
        value: A date, a datetime, an ISO 8601 string or a written date
            such as "22 Feb 2023" or "February 22, 2023".

    Returns:
        Aware datetime in UTC.

    Raises:
        ValueError: If the value is a string in none of the accepted forms.
        TypeError: If the value is of any other type.
    """
    if isinstance(value, str):
        text = value.strip()
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            parsed = _parse_written_date(text)
            if parsed is None:
                raise ValueError(f"Invalid date string: {value!r}") from None
        return _as_utc(parsed)
    if isinstance(value, datetime):
        return _as_utc(value)
    if isinstance(value, date):
        return datetime.combine(value, time.min, tzinfo=timezone.utc)
    raise TypeError(f"Expected a date or string, got {type(value).__name__}")


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _parse_written_date(text: str) -> datetime | None:
    normalized = " ".join(text.split())
    for fmt in WRITTEN_DATE_FORMATS:
        try:
            return datetime.strptime(normalized, fmt)
        except ValueError:
            continue
    return None


def escape_xml(text: str) -> str:
    """Escape special XML characters in a string.

    Args:
        text: The string to escape.

    Returns:
        The escaped string, safe for XML text nodes and attribute values.

    Examples:
        >>> escape_xml('Tom & "Jerry" <3')
        'Tom &amp; &quot;Jerry&quot; &lt;3'
    """
    return (
        text.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
        .replace("'", "&apos;")
    )


def join_root_url(root_url: str, path: str) -> str:
    """Safely join a root URL and a path, avoiding double slashes.

    Args:
        root_url: Base URL (e.g., https://example.com/blog).
        path: Path beginning with or without a leading slash.

    Returns:
        Combined URL with proper slash handling.

    Examples:
        >>> join_root_url('https://example.com/', 'projects/a/')
        'https://example.com/projects/a/'
    """
    if not root_url:
        return path
    base = root_url.rstrip("/")
    suffix = path if path.startswith("/") else f"/{path}"
    return f"{base}{suffix}"


def is_content_file(path: Path) -> bool:
    """Check if a path is a Markdown or MDX content file.

    Args:
        path: Path to check.

    Returns:
        True if the file has a .md or .mdx extension (case-insensitive).
    """
    return path.suffix.lower() in CONTENT_SUFFIXES


def build_tags_index(entries: Iterable) -> dict[str, list]:
    """Build an index mapping tags to lists of entries containing that tag.

    Args:
        entries: Iterable of entries whose data has a 'tags' attribute.

    Returns:
        Dictionary mapping tag names to lists of entries.
    """
    tags: dict[str, list] = {}
    for entry in entries:
        for tag in getattr(entry.data, "tags", []):
            tags.setdefault(tag, []).append(entry)
    return tags
