"""Feed generation for folio.

This module projects validated entries into syndication feeds. Generation
is a pure function of its inputs: the same entries and configuration always
produce the same document, and items follow the order of the input
sequence. Draft filtering, if wanted, is the caller's job.

Classes:
    FeedGenerator: Abstract base class for feed generators.
    RSSGenerator: Generates RSS 2.0 documents.
    FeedResponse: Body and content type served by a feed endpoint.
    FeedError: Raised when a feed cannot be produced.

Functions:
    projects_rss: The projects feed endpoint.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable
from dataclasses import dataclass
from email.utils import format_datetime
from pathlib import Path
from typing import TYPE_CHECKING

from .site_config import SITE_CONFIG, SiteConfig
from .utils import escape_xml, join_root_url

if TYPE_CHECKING:
    from .collections import ContentStore
    from .content import Entry

RSS_CONTENT_TYPE = "application/rss+xml; charset=utf-8"


class FeedError(Exception):
    """Raised when a feed cannot be generated."""


@dataclass(frozen=True)
class FeedResponse:
    """A feed endpoint response.

    Attributes:
        body: The XML document.
        content_type: MIME type of the document.
        status: HTTP-style status code.
    """

    body: str
    content_type: str = RSS_CONTENT_TYPE
    status: int = 200


class FeedGenerator(ABC):
    """Abstract base class for feed generators.

    Subclasses implement specific feed formats.
    """

    @property
    @abstractmethod
    def filename(self) -> str:
        """Return the output path for this feed, relative to the output directory."""
        ...

    @abstractmethod
    def generate(
        self,
        entries: Iterable[Entry],
        site_url: str,
        config: SiteConfig = SITE_CONFIG,
    ) -> str:
        """Generate feed content from entries.

        Args:
            entries: Entries to include, in feed order.
            site_url: Deployed base URL of the site.
            config: Site configuration for the channel title and description.

        Returns:
            Feed document as a string.

        Raises:
            FeedError: If the feed cannot be generated.
        """
        ...

    def write(
        self,
        output_dir: Path,
        entries: Iterable[Entry],
        site_url: str,
        config: SiteConfig = SITE_CONFIG,
    ) -> Path:
        """Generate and write the feed to the output directory.

        Returns:
            Path of the written file.
        """
        content = self.generate(entries, site_url, config)
        output_path = output_dir / self.filename
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(content, encoding="utf-8")
        return output_path


class RSSGenerator(FeedGenerator):
    """Generates an RSS 2.0 feed for one collection.

    Item links have the form `<site>/<collection_path>/<entry id>/`.

    Attributes:
        collection_path: URL path segment the collection is published under.
    """

    def __init__(self, collection_path: str = "projects"):
        self.collection_path = collection_path.strip("/")

    @property
    def filename(self) -> str:
        return f"{self.collection_path}/rss.xml"

    def item_link(self, site_url: str, entry_id: str) -> str:
        return join_root_url(site_url, f"/{self.collection_path}/{entry_id}/")

    def generate(
        self,
        entries: Iterable[Entry],
        site_url: str,
        config: SiteConfig = SITE_CONFIG,
    ) -> str:
        """Generate RSS feed content.

        Args:
            entries: Entries whose data has a title and a publish date.
            site_url: Deployed base URL of the site.
            config: Site configuration for the channel title and description.

        Returns:
            RSS XML content.

        Raises:
            FeedError: If no site URL is configured.
        """
        if not site_url:
            raise FeedError("A site URL is required to build absolute feed links")

        items = []
        for entry in entries:
            link = escape_xml(self.item_link(site_url, entry.id))
            pub_date = format_datetime(entry.data.publish_date, usegmt=True)
            items.append(
                f"<item><title>{escape_xml(entry.data.title)}</title>"
                f"<link>{link}</link>"
                f'<guid isPermaLink="true">{link}</guid>'
                f"<pubDate>{pub_date}</pubDate></item>"
            )

        rss = [
            '<?xml version="1.0" encoding="UTF-8"?>',
            '<rss version="2.0"><channel>',
            f"<title>{escape_xml(config.title)}</title>",
            f"<description>{escape_xml(config.description)}</description>",
            f"<link>{escape_xml(join_root_url(site_url, '/'))}</link>",
        ]
        rss.extend(items)
        rss.append("</channel></rss>")
        return "\n".join(rss)


def projects_rss(
    store: ContentStore,
    site_url: str,
    config: SiteConfig = SITE_CONFIG,
) -> FeedResponse:
    """Serve the projects feed.

    The project collection is queried strictly, so any invalid project file
    fails the whole request instead of producing a partial feed.

    Args:
        store: Content store to read the project collection from.
        site_url: Deployed base URL of the site.
        config: Site configuration.

    Returns:
        FeedResponse carrying the RSS document.

    Raises:
        CollectionLoadError: If any project file failed validation.
        FeedError: If no site URL is configured.
    """
    projects = store.get_collection("project", strict=True)
    body = RSSGenerator("projects").generate(projects, site_url, config)
    return FeedResponse(body=body)
