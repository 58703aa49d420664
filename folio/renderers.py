"""Markdown rendering for folio entries.

Entry bodies are rendered to HTML with mistune. Headings get stable anchor
ids and are collected so templates can build a table of contents.

Key classes:
- Heading: A heading extracted while rendering.
- RenderedContent: HTML plus its headings.
- MarkdownRenderer: Renders a Markdown body.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

import mistune

from .utils import escape_xml


@dataclass(frozen=True)
class Heading:
    """A heading extracted from markdown content.

    Attributes:
        id: Anchor ID for the heading (URL-friendly slug).
        text: The text content of the heading.
        level: Heading level (1-6).
    """

    id: str
    text: str
    level: int


@dataclass(frozen=True)
class RenderedContent:
    html: str
    headings: list[Heading] = field(default_factory=list)


def _generate_heading_id(text: str) -> str:
    """Generate a URL-friendly ID from heading text."""
    slug = re.sub(r"<[^>]+>", "", text).lower().strip()
    slug = re.sub(r"[^\w\s-]", "", slug)
    slug = re.sub(r"[-\s]+", "-", slug)
    return slug.strip("-")


class _HeadingRenderer(mistune.HTMLRenderer):
    """HTML renderer that adds ids to headings and records them."""

    def __init__(self):
        super().__init__(escape=False)
        self.headings: list[Heading] = []
        self._heading_id_counts: dict[str, int] = {}

    def heading(self, text: str, level: int, **attrs) -> str:
        base_id = _generate_heading_id(text)

        if base_id in self._heading_id_counts:
            self._heading_id_counts[base_id] += 1
            heading_id = f"{base_id}-{self._heading_id_counts[base_id]}"
        else:
            self._heading_id_counts[base_id] = 0
            heading_id = base_id

        self.headings.append(Heading(id=heading_id, text=text, level=level))
        return f'<h{level} id="{escape_xml(heading_id)}">{text}</h{level}>\n'


class MarkdownRenderer:
    """Renders Markdown (and the Markdown part of MDX) to HTML."""

    plugins = ["strikethrough", "footnotes", "table", "url"]

    def render(self, content: str) -> RenderedContent:
        """Render Markdown content to HTML.

        Args:
            content: Markdown source content.

        Returns:
            RenderedContent with the HTML and the extracted headings.
        """
        renderer = _HeadingRenderer()
        markdown = mistune.create_markdown(renderer=renderer, plugins=self.plugins)
        html = markdown(content)
        return RenderedContent(html=html, headings=list(renderer.headings))


default_renderer = MarkdownRenderer()
