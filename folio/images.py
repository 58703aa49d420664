"""Image resolution for folio.

Front-matter image fields name files next to the content (or under the
public image root). This module resolves those names to ImageReference
objects that carry the dimensions and format read with Pillow.

Key classes:
- ImageReference: Resolved image source with its metadata.
- PillowImageResolver: Default ImageResolver implementation.
- ImageNotFoundError / UnreadableImageError: Resolution failures.
"""

from __future__ import annotations

from pathlib import Path

from PIL import Image, UnidentifiedImageError
from pydantic import BaseModel, ConfigDict

REMOTE_PREFIXES = ("http://", "https://", "//")


class ImageError(Exception):
    """Base class for image resolution failures."""


class ImageNotFoundError(ImageError):
    """Error raised when an image file is not found.

    Attributes:
        src: The image source that was requested.
        searched_paths: List of paths that were searched.
    """

    def __init__(self, src: str, searched_paths: list[Path]):
        self.src = src
        self.searched_paths = searched_paths
        paths_str = ", ".join(str(p) for p in searched_paths)
        super().__init__(f"image '{src}' not found. Searched: {paths_str}")


class UnreadableImageError(ImageError):
    """Error raised when a file exists but is not a readable image."""

    def __init__(self, src: str, path: Path):
        self.src = src
        self.path = path
        super().__init__(f"image '{src}' at {path} could not be read")


class ImageReference(BaseModel):
    """A resolved image source.

    Attributes:
        src: Source as written in front matter.
        path: Resolved file path, None for remote or unresolved images.
        width: Pixel width, when known.
        height: Pixel height, when known.
        format: Lower-case image format (png, jpeg, webp, ...), when known.
    """

    model_config = ConfigDict(frozen=True)

    src: str
    path: Path | None = None
    width: int | None = None
    height: int | None = None
    format: str | None = None

    @property
    def is_remote(self) -> bool:
        return self.src.startswith(REMOTE_PREFIXES)


class PillowImageResolver:
    """Resolves image sources to files and reads their metadata with Pillow.

    Relative sources are looked up next to the content file first. Sources
    starting with '/' are looked up under the image root. Remote URLs are
    passed through without metadata.

    Attributes:
        root: Directory for root-relative image sources.
    """

    def __init__(self, root: Path | None = None):
        self.root = root

    def resolve(self, src: str, relative_to: Path | None = None) -> ImageReference:
        """Resolve an image source.

        Args:
            src: Raw image source from front matter.
            relative_to: Content file the source is relative to.

        Returns:
            ImageReference with dimensions and format for local files.

        Raises:
            ImageNotFoundError: If no candidate file exists.
            UnreadableImageError: If the file is not a readable image.
        """
        if src.startswith(REMOTE_PREFIXES):
            return ImageReference(src=src)

        candidates = self._candidates(src, relative_to)
        for candidate in candidates:
            if candidate.is_file():
                return self._read(src, candidate)
        raise ImageNotFoundError(src, candidates)

    def _candidates(self, src: str, relative_to: Path | None) -> list[Path]:
        candidates: list[Path] = []
        if src.startswith("/"):
            if self.root is not None:
                candidates.append(self.root / src.lstrip("/"))
            return candidates
        if relative_to is not None:
            candidates.append(relative_to.parent / src)
        if self.root is not None:
            candidates.append(self.root / src)
        return candidates

    def _read(self, src: str, path: Path) -> ImageReference:
        try:
            with Image.open(path) as img:
                width, height = img.size
                fmt = (img.format or path.suffix.lstrip(".")).lower()
        except (UnidentifiedImageError, OSError) as exc:
            raise UnreadableImageError(src, path) from exc
        return ImageReference(src=src, path=path, width=width, height=height, format=fmt)
