"""Site-wide configuration for folio.

SITE_CONFIG and MENU_LINKS are built once at import and never change. They
are frozen values handed to templates and to the feed generator; there is
no re-initialization path.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import date, datetime
from types import MappingProxyType

from .utils import parse_date

_MONTHS = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)

# Locales that write the month before the day
_MONTH_FIRST_LOCALES = ("en-US",)


@dataclass(frozen=True)
class DateConfig:
    """Date formatting settings.

    Attributes:
        locale: BCP 47 locale tag, e.g. 'en-GB'.
        options: Formatting options for 'day', 'month' and 'year'. Values are
            'numeric', '2-digit', 'short' or 'long' (the last two for months).
    """

    locale: str
    options: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))


@dataclass(frozen=True)
class MenuLink:
    path: str
    title: str


@dataclass(frozen=True)
class SiteConfig:
    """Global site metadata read by templates.

    Attributes:
        author: Author name, used in meta tags and generated images.
        date: Date formatting settings.
        description: Default meta description and feed description.
        lang: HTML lang attribute.
        og_locale: OpenGraph locale.
        title: Site title, used for the meta title and the feed title.
    """

    author: str
    date: DateConfig
    description: str
    lang: str
    og_locale: str
    title: str


SITE_CONFIG = SiteConfig(
    author="Rodrigo Gimenez",
    date=DateConfig(
        locale="en-GB",
        options=MappingProxyType({"day": "numeric", "month": "short", "year": "numeric"}),
    ),
    description=(
        "Welcome to my personal portfolio! I’m an Android developer sharing insightful "
        "blog posts on mobile development, best practices, and tutorials. Explore my "
        "projects, apps, and coding journey to stay inspired and learn with me."
    ),
    lang="en-GB",
    og_locale="en_GB",
    title="",
)

MENU_LINKS: tuple[MenuLink, ...] = (
    MenuLink(path="/", title="Home"),
    MenuLink(path="/projects/", title="Projects"),
    MenuLink(path="/posts/", title="Blog"),
    MenuLink(path="/about/", title="About"),
)


def _format_part(kind: str, value: int, style: str) -> str:
    if kind == "month" and style == "long":
        return _MONTHS[value - 1]
    if kind == "month" and style == "short":
        return _MONTHS[value - 1][:3]
    if style == "2-digit":
        return f"{value % 100:02d}" if kind == "year" else f"{value:02d}"
    if style == "numeric":
        return str(value)
    raise ValueError(f"Unsupported {kind} format: {style!r}")


def format_date(value: date | datetime | str, config: SiteConfig = SITE_CONFIG) -> str:
    """Format a date for display using the site's locale settings.

    Args:
        value: Date, datetime or ISO 8601 string.
        config: Site configuration supplying locale and options.

    Returns:
        The formatted date, e.g. '15 Jan 2024' for en-GB with short months.

    Raises:
        ValueError: If an option holds an unsupported style.
    """
    when = value.date() if isinstance(value, datetime) else value
    if isinstance(when, str):
        when = parse_date(when).date()
    options = config.date.options
    parts = {
        kind: _format_part(kind, getattr(when, kind), options[kind])
        for kind in ("day", "month", "year")
        if kind in options
    }
    month_is_name = options.get("month") in ("short", "long")
    if config.date.locale in _MONTH_FIRST_LOCALES:
        order = ("month", "day", "year")
    else:
        order = ("day", "month", "year")
    words = [parts[kind] for kind in order if kind in parts]
    if month_is_name:
        if config.date.locale in _MONTH_FIRST_LOCALES and "day" in parts and "year" in parts:
            return f"{parts['month']} {parts['day']}, {parts['year']}"
        return " ".join(words)
    return "/".join(words)
