"""Front-matter extraction for folio.

Content files start with an optional YAML block between `---` markers.
This module splits that block from the body and parses it.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Any

import yaml

FRONTMATTER_RE = re.compile(r"^\ufeff?---[ \t]*\r?\n(.*?)\r?\n---[ \t]*(?:\r?\n|$)", re.DOTALL)
EMPTY_FRONTMATTER_RE = re.compile(r"^\ufeff?---[ \t]*\r?\n---[ \t]*(?:\r?\n|$)")


class FrontmatterError(Exception):
    """Error raised when a front-matter block cannot be parsed.

    Attributes:
        source_path: Path to the file, when known.
        message: Human-readable error message.
    """

    def __init__(self, message: str, source_path: Path | None = None):
        self.source_path = source_path
        self.message = message
        prefix = f"{source_path}: " if source_path is not None else ""
        super().__init__(f"{prefix}{message}")


def extract_frontmatter(
    text: str, source_path: Path | None = None
) -> tuple[dict[str, Any], str]:
    """Extract YAML front matter from content.

    Args:
        text: Raw file content.
        source_path: Path of the file, used in error messages.

    Returns:
        Tuple of (front-matter dict, remaining body). A file without a
        front-matter block yields an empty dict and the full text.

    Raises:
        FrontmatterError: If the block is not valid YAML or not a mapping.
    """
    empty = EMPTY_FRONTMATTER_RE.match(text)
    if empty:
        return {}, text[empty.end() :]
    match = FRONTMATTER_RE.match(text)
    if not match:
        return {}, text
    try:
        data = yaml.safe_load(match.group(1))
    except (yaml.YAMLError, ValueError) as exc:
        # Out-of-range timestamps surface as ValueError from the YAML constructor.
        raise FrontmatterError(f"Invalid YAML front matter: {exc}", source_path) from exc
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise FrontmatterError(
            f"Front matter must be a mapping, got {type(data).__name__}", source_path
        )
    return data, text[match.end() :]


def read_frontmatter(path: Path) -> tuple[dict[str, Any], str]:
    """Read a content file and extract its front matter.

    Args:
        path: Path to the content file.

    Returns:
        Tuple of (front-matter dict, remaining body).

    Raises:
        FrontmatterError: If the file cannot be read as UTF-8 text or its
            front matter is invalid.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        raise FrontmatterError(f"File is not valid UTF-8: {exc}", path) from exc
    except OSError as exc:
        raise FrontmatterError(f"Cannot read file: {exc}", path) from exc
    return extract_frontmatter(text, path)
