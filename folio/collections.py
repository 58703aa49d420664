from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping, Sequence
from datetime import datetime, timezone
from pathlib import Path

from .content import CollectionDefinition, Entry, EntryValidationError, LoadResult, load_collection
from .protocols import ImageResolver
from .schemas import Post, Project, Series
from .utils import build_tags_index

_MIN_DATE = datetime.min.replace(tzinfo=timezone.utc)

COLLECTIONS: Mapping[str, CollectionDefinition] = {
    "post": CollectionDefinition(name="post", base="post", schema=Post),
    "series": CollectionDefinition(name="series", base="series", schema=Series),
    "project": CollectionDefinition(name="project", base="project", schema=Project),
}


class UnknownCollectionError(KeyError):
    """Raised when a collection name has no definition."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Unknown collection: {name!r}")


class CollectionLoadError(Exception):
    """Raised by a strict query when files of the collection failed to load.

    Attributes:
        collection: Name of the collection.
        errors: The per-file errors.
    """

    def __init__(self, collection: str, errors: list[EntryValidationError]):
        self.collection = collection
        self.errors = errors
        super().__init__(
            f"{len(errors)} invalid entr{'y' if len(errors) == 1 else 'ies'} "
            f"in collection '{collection}'"
        )


def _publish_date(entry: Entry) -> datetime:
    return getattr(entry.data, "publish_date", None) or _MIN_DATE


class EntryCollection(Sequence[Entry]):
    """Lightweight helper for working with lists of entries in templates and code."""

    def __init__(self, entries: Iterable[Entry]):
        self._entries = list(entries)

    def __iter__(self) -> Iterator[Entry]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __getitem__(self, item):
        return self._entries[item]

    def get(self, entry_id: str) -> Entry | None:
        for entry in self._entries:
            if entry.id == entry_id:
                return entry
        return None

    def published(self) -> EntryCollection:
        return EntryCollection(e for e in self._entries if not getattr(e.data, "draft", False))

    def drafts(self) -> EntryCollection:
        return EntryCollection(e for e in self._entries if getattr(e.data, "draft", False))

    def featured(self) -> EntryCollection:
        return EntryCollection(e for e in self._entries if getattr(e.data, "featured", False))

    def with_tag(self, tag: str) -> EntryCollection:
        wanted = tag.lower()
        return EntryCollection(e for e in self._entries if wanted in getattr(e.data, "tags", []))

    def sorted(self, reverse: bool = True) -> EntryCollection:
        """Sort entries by publish date, then by id.

        Args:
            reverse: If True (default), newest first.

        Returns:
            A new EntryCollection with sorted entries.
        """
        return EntryCollection(
            sorted(self._entries, key=lambda e: (_publish_date(e), e.id), reverse=reverse)
        )

    def latest(self, count: int = 5) -> EntryCollection:
        return EntryCollection(self.sorted()[:count])

    def in_series(self, series_id: str) -> EntryCollection:
        """Return the entries of a series in reading order.

        Entries are ordered by orderInSeries; entries without one come last.
        Ties fall back to publish date, then id.
        """
        members = [e for e in self._entries if getattr(e.data, "series_id", None) == series_id]

        def sort_key(entry: Entry):
            order = entry.data.order_in_series
            return (order is None, order or 0, _publish_date(entry), entry.id)

        return EntryCollection(sorted(members, key=sort_key))

    def tags(self) -> dict[str, EntryCollection]:
        return {tag: EntryCollection(v) for tag, v in build_tags_index(self._entries).items()}

    def __repr__(self) -> str:  # pragma: no cover - for debugging
        return f"EntryCollection({len(self._entries)} entries)"


class ContentStore:
    """Loads collections on first use and serves them read-only afterwards.

    Attributes:
        content_dir: Directory holding one sub-directory per collection.
        image_resolver: Capability used for image fields.
        definitions: Collection definitions by name.
    """

    def __init__(
        self,
        content_dir: Path,
        image_resolver: ImageResolver | None = None,
        definitions: Mapping[str, CollectionDefinition] | None = None,
    ):
        self.content_dir = content_dir
        self.image_resolver = image_resolver
        self.definitions = dict(definitions if definitions is not None else COLLECTIONS)
        self._results: dict[str, LoadResult] = {}

    def load(self, name: str) -> LoadResult:
        """Load a collection, once.

        Raises:
            UnknownCollectionError: If no collection has that name.
        """
        if name not in self.definitions:
            raise UnknownCollectionError(name)
        if name not in self._results:
            self._results[name] = load_collection(
                self.definitions[name], self.content_dir, self.image_resolver
            )
        return self._results[name]

    def load_all(self) -> dict[str, LoadResult]:
        return {name: self.load(name) for name in self.definitions}

    def get_collection(self, name: str, strict: bool = False) -> EntryCollection:
        """Return the valid entries of a collection.

        Args:
            name: Collection name.
            strict: Raise instead of skipping files that failed validation.

        Raises:
            UnknownCollectionError: If no collection has that name.
            CollectionLoadError: If strict and any file failed.
        """
        result = self.load(name)
        if strict and result.errors:
            raise CollectionLoadError(name, result.errors)
        return EntryCollection(result.entries)

    def get_entry(self, name: str, entry_id: str) -> Entry | None:
        return self.get_collection(name).get(entry_id)

    def errors(self, name: str | None = None) -> list[EntryValidationError]:
        names = [name] if name is not None else list(self.definitions)
        errors: list[EntryValidationError] = []
        for collection in names:
            errors.extend(self.load(collection).errors)
        return errors


def find_dangling_series_refs(posts: Iterable[Entry], series: Iterable[Entry]) -> list[Entry]:
    """Return posts whose seriesId matches no series id.

    Dangling references are not validation errors; callers decide whether
    to warn, fail or ignore.
    """
    known = {s.data.id for s in series}
    return [p for p in posts if p.data.series_id and p.data.series_id not in known]
