"""Protocol definitions for folio.

These protocols describe the capabilities the content layer relies on but
does not own, so the surrounding build tooling (or a test) can supply its
own implementation.
"""

from __future__ import annotations

from abc import abstractmethod
from pathlib import Path
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from .images import ImageReference


@runtime_checkable
class ImageResolver(Protocol):
    """Protocol for resolving image fields declared in front matter.

    Implementations turn the raw `src` string of an image field into an
    ImageReference carrying dimensions and format.
    """

    @abstractmethod
    def resolve(self, src: str, relative_to: Path | None = None) -> ImageReference:
        """Resolve an image source.

        Args:
            src: Raw image source from front matter.
            relative_to: Content file the source is relative to, if known.

        Returns:
            Resolved image reference.

        Raises:
            ImageNotFoundError: If the image cannot be found or read.
        """
        ...


@runtime_checkable
class ContentLoader(Protocol):
    """Protocol for discovering the files of one collection."""

    @abstractmethod
    def iter_files(self) -> list[Path]:
        """Return the content files of the collection, in a stable order."""
        ...
