"""Content loading for folio.

This module discovers the files of a collection, parses their front matter
and validates it against the collection schema, producing Entry objects.

Every file is validated on its own. A file that fails is reported as an
EntryValidationError in the LoadResult and never stops its siblings from
loading.

Key classes:
- CollectionDefinition: Name, base directory, glob patterns and schema.
- Entry: A validated content file.
- EntryValidationError: A rejected content file with its field errors.
- FileContentLoader: Discovers the files of one collection.
- EntryBuilder: Builds an Entry from one file.
- LoadResult: Entries and errors of one collection.

Functions:
    load_collection: Load and validate every file of a collection.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ValidationError

from .extractors import FrontmatterError, read_frontmatter
from .protocols import ImageResolver
from .renderers import RenderedContent, default_renderer
from .schemas import FieldError, field_errors_from, validate_entry
from .utils import entry_id_from_path, is_content_file


class EntryValidationError(Exception):
    """A content file rejected by its collection.

    Attributes:
        source_path: Path to the rejected file.
        collection: Name of the collection the file belongs to.
        field_errors: Every failing field, with path, reason and value.
    """

    def __init__(
        self,
        source_path: Path,
        collection: str,
        field_errors: list[FieldError],
    ):
        self.source_path = source_path
        self.collection = collection
        self.field_errors = field_errors
        count = len(field_errors)
        noun = "error" if count == 1 else "errors"
        super().__init__(
            f"{source_path}: {count} validation {noun} in {collection} entry"
        )

    @property
    def message(self) -> str:
        return "; ".join(str(error) for error in self.field_errors)


@dataclass(frozen=True)
class CollectionDefinition:
    """Declares where a collection lives and how its entries are validated.

    Attributes:
        name: Collection name, e.g. 'post'.
        base: Directory relative to the content directory.
        schema: Model class every entry is validated against.
        patterns: Glob patterns selecting the content files.
    """

    name: str
    base: str
    schema: type[BaseModel]
    patterns: tuple[str, ...] = ("**/*.md", "**/*.mdx")


@dataclass(frozen=True)
class Entry:
    """A validated content file.

    Attributes:
        id: Identifier derived from the file path (or its 'slug' key).
        collection: Name of the owning collection.
        data: Validated schema record.
        body: Content after the front-matter block.
        path: Path to the source file.
    """

    id: str
    collection: str
    data: Any
    body: str
    path: Path

    def render(self) -> RenderedContent:
        """Render the entry body to HTML."""
        return default_renderer.render(self.body)


@dataclass
class LoadResult:
    """Outcome of loading one collection.

    Attributes:
        entries: Entries that validated, in file order.
        errors: One error per rejected file.
    """

    entries: list[Entry] = field(default_factory=list)
    errors: list[EntryValidationError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


class FileContentLoader:
    """Discovers the content files of one collection.

    Files and directories whose name starts with an underscore are skipped.

    Attributes:
        base_dir: Directory holding the collection's files.
        patterns: Glob patterns relative to base_dir.
    """

    def __init__(self, base_dir: Path, patterns: tuple[str, ...] = ("**/*.md", "**/*.mdx")):
        self.base_dir = base_dir
        self.patterns = patterns

    def iter_files(self) -> list[Path]:
        """Return matching content files, sorted by path.

        Returns:
            List of paths; empty if the base directory does not exist.
        """
        if not self.base_dir.is_dir():
            return []
        found: set[Path] = set()
        for pattern in self.patterns:
            for path in self.base_dir.glob(pattern):
                if not path.is_file() or not is_content_file(path):
                    continue
                rel = path.relative_to(self.base_dir)
                if any(part.startswith("_") for part in rel.parts):
                    continue
                found.add(path)
        return sorted(found)


class EntryBuilder:
    """Builds Entry objects for one collection.

    Attributes:
        definition: The collection being built.
        base_dir: Directory holding the collection's files.
        image_resolver: Capability used for image fields.
    """

    def __init__(
        self,
        definition: CollectionDefinition,
        base_dir: Path,
        image_resolver: ImageResolver | None = None,
    ):
        self.definition = definition
        self.base_dir = base_dir
        self.image_resolver = image_resolver

    def build(self, path: Path) -> Entry:
        """Build an Entry from a content file.

        Args:
            path: Path to the content file.

        Returns:
            The validated Entry.

        Raises:
            EntryValidationError: If the front matter is malformed or fails
                schema validation.
        """
        try:
            frontmatter, body = read_frontmatter(path)
        except FrontmatterError as exc:
            raise EntryValidationError(
                path, self.definition.name, [FieldError(path="", message=exc.message)]
            ) from exc

        try:
            data = validate_entry(
                self.definition.schema,
                frontmatter,
                image_resolver=self.image_resolver,
                source_path=path,
            )
        except ValidationError as exc:
            raise EntryValidationError(
                path, self.definition.name, field_errors_from(exc)
            ) from exc

        return Entry(
            id=self._entry_id(path, frontmatter),
            collection=self.definition.name,
            data=data,
            body=body,
            path=path,
        )

    def _entry_id(self, path: Path, frontmatter: dict[str, Any]) -> str:
        slug = frontmatter.get("slug")
        if isinstance(slug, str) and slug.strip():
            return slug.strip().strip("/")
        return entry_id_from_path(path.relative_to(self.base_dir))


def load_collection(
    definition: CollectionDefinition,
    content_dir: Path,
    image_resolver: ImageResolver | None = None,
) -> LoadResult:
    """Load and validate every file of a collection.

    Args:
        definition: Collection to load.
        content_dir: Directory holding all collection directories.
        image_resolver: Capability used for image fields.

    Returns:
        LoadResult with the valid entries and one error per rejected file.
    """
    base_dir = content_dir / definition.base
    loader = FileContentLoader(base_dir, definition.patterns)
    builder = EntryBuilder(definition, base_dir, image_resolver)

    result = LoadResult()
    seen: dict[str, Path] = {}
    for path in loader.iter_files():
        try:
            entry = builder.build(path)
        except EntryValidationError as exc:
            result.errors.append(exc)
            continue
        if entry.id in seen:
            result.errors.append(
                EntryValidationError(
                    path,
                    definition.name,
                    [
                        FieldError(
                            path="",
                            message=f"duplicate entry id '{entry.id}', already used by {seen[entry.id]}",
                            value=entry.id,
                        )
                    ],
                )
            )
            continue
        seen[entry.id] = path
        result.entries.append(entry)
    return result
