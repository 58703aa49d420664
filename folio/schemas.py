"""Content schemas for folio.

Each content kind (post, project, series) is a frozen pydantic model.
Front matter is written in camelCase; the models expose snake_case
attributes and accept either spelling on input.

Primitive fields are strict: a number is never accepted for a string, and a
string is never accepted for a boolean. Date fields accept a date, a
datetime or an ISO 8601 string and always hold an aware UTC datetime.

Key classes:
- Post: A blog entry.
- Project: A portfolio project, the source of the projects feed.
- Series: A curated sequence of posts.
- CoverImage / HeroImage: Optional nested image structures.
- FieldError: One failing field of a rejected entry.

Functions:
    validate_entry: Validate a raw front-matter mapping against a schema.
    field_errors_from: Flatten a pydantic ValidationError into FieldErrors.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import date, datetime
from pathlib import Path
from typing import Annotated, Any, Optional, TypeVar

from pydantic import (
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    Strict,
    StrictBool,
    StrictStr,
    ValidationError,
    ValidationInfo,
    field_validator,
)
from pydantic.alias_generators import to_camel

from .images import ImageError, ImageReference
from .protocols import ImageResolver
from .utils import canonicalize_tags, parse_date

TITLE_MAX_LENGTH = 60

SchemaT = TypeVar("SchemaT", bound=BaseModel)


def _coerce_date(value: Any) -> Any:
    # datetime is a date subclass, so both are covered here
    if isinstance(value, (str, date)):
        return parse_date(value)
    return value


def _coerce_optional_date(value: Any) -> Any:
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    return _coerce_date(value)


def _resolve_image_src(value: Any, info: ValidationInfo) -> Any:
    if isinstance(value, ImageReference):
        return value
    if not isinstance(value, str):
        raise ValueError("image source must be a string")
    context = info.context or {}
    resolver: ImageResolver | None = context.get("image_resolver")
    if resolver is None:
        return ImageReference(src=value)
    try:
        return resolver.resolve(value, context.get("source_path"))
    except ImageError as exc:
        raise ValueError(str(exc)) from exc


UTCDateTime = Annotated[datetime, Strict()]
PublishDate = Annotated[UTCDateTime, BeforeValidator(_coerce_date)]
UpdatedDate = Annotated[Optional[UTCDateTime], BeforeValidator(_coerce_optional_date)]
Number = Annotated[float, Strict()]
ImageSrc = Annotated[ImageReference, BeforeValidator(_resolve_image_src)]


class ContentModel(BaseModel):
    """Base model for all front-matter records."""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


class CoverImage(ContentModel):
    """Cover image shown on listings. Both fields are required."""

    alt: StrictStr
    src: ImageSrc


class HeroImage(ContentModel):
    """Hero image shown at the top of a post."""

    src: ImageSrc
    alt: Optional[StrictStr] = None
    infer_size: Optional[StrictBool] = None
    width: Optional[Number] = None
    height: Optional[Number] = None
    color: Optional[StrictStr] = None


class BaseSchema(ContentModel):
    """Fields shared by every titled content kind."""

    title: StrictStr = Field(max_length=TITLE_MAX_LENGTH)


class PublishableSchema(BaseSchema):
    """Fields shared by posts and projects.

    The tags field is a two-stage pipeline: the default (an empty list)
    applies first, then canonicalize_tags runs on whatever value results,
    including the default.
    """

    description: StrictStr
    cover_image: Optional[CoverImage] = None
    draft: StrictBool = False
    og_image: Optional[StrictStr] = None
    tags: list[StrictStr] = Field(default_factory=list, validate_default=True)
    publish_date: PublishDate
    updated_date: UpdatedDate = None

    @field_validator("tags")
    @classmethod
    def canonical_tags(cls, value: list[str]) -> list[str]:
        return canonicalize_tags(value)


class Post(PublishableSchema):
    """A blog entry.

    `series_id` is a soft reference to a Series id; a dangling reference is
    not a validation error.
    """

    language: Optional[StrictStr] = None
    hero_image: Optional[HeroImage] = None
    series_id: Optional[StrictStr] = None
    order_in_series: Optional[Number] = None


class Project(PublishableSchema):
    """A portfolio project."""


class Series(ContentModel):
    """A named, curated sequence of posts."""

    id: StrictStr
    title: StrictStr
    description: StrictStr
    featured: StrictBool = False


@dataclass(frozen=True)
class FieldError:
    """A single failing field of a rejected entry.

    Attributes:
        path: Dotted field path as written in front matter, e.g. 'heroImage.src'.
        message: Human-readable reason.
        value: The offending input value (None when the field was missing).
    """

    path: str
    message: str
    value: Any = None

    def __str__(self) -> str:
        location = self.path or "<front matter>"
        return f"{location}: {self.message} (got {self.value!r})"


def field_errors_from(exc: ValidationError) -> list[FieldError]:
    """Flatten a pydantic ValidationError into FieldError records.

    Args:
        exc: The validation error raised by a schema.

    Returns:
        One FieldError per failing location, in pydantic's order.
    """
    errors: list[FieldError] = []
    for item in exc.errors(include_url=False):
        path = ".".join(str(part) for part in item["loc"])
        value = None if item["type"] == "missing" else item.get("input")
        errors.append(FieldError(path=path, message=item["msg"], value=value))
    return errors


def validate_entry(
    schema: type[SchemaT],
    data: Mapping[str, Any],
    *,
    image_resolver: ImageResolver | None = None,
    source_path: Path | None = None,
) -> SchemaT:
    """Validate a raw front-matter mapping against a schema.

    Args:
        schema: Model class to validate against.
        data: Raw front-matter mapping.
        image_resolver: Capability used to resolve image fields.
        source_path: Content file the data came from, for relative images.

    Returns:
        The validated, immutable record.

    Raises:
        pydantic.ValidationError: If any field fails validation.
    """
    context = {"image_resolver": image_resolver, "source_path": source_path}
    return schema.model_validate(dict(data), context=context)
