import dataclasses
from datetime import date, datetime, timezone

import pytest

from folio.site_config import MENU_LINKS, SITE_CONFIG, DateConfig, SiteConfig, format_date


def config_with(locale, **options):
    return dataclasses.replace(SITE_CONFIG, date=DateConfig(locale=locale, options=options))


def test_site_config_values():
    assert SITE_CONFIG.author == "Rodrigo Gimenez"
    assert SITE_CONFIG.lang == "en-GB"
    assert SITE_CONFIG.og_locale == "en_GB"
    assert SITE_CONFIG.date.locale == "en-GB"
    assert dict(SITE_CONFIG.date.options) == {"day": "numeric", "month": "short", "year": "numeric"}
    assert SITE_CONFIG.title == ""
    assert SITE_CONFIG.description.startswith("Welcome to my personal portfolio")


def test_site_config_is_immutable():
    with pytest.raises(dataclasses.FrozenInstanceError):
        SITE_CONFIG.title = "Changed"
    with pytest.raises(TypeError):
        SITE_CONFIG.date.options["day"] = "2-digit"


def test_menu_links_order():
    assert [(link.path, link.title) for link in MENU_LINKS] == [
        ("/", "Home"),
        ("/projects/", "Projects"),
        ("/posts/", "Blog"),
        ("/about/", "About"),
    ]
    assert isinstance(MENU_LINKS, tuple)


def test_format_date_default_locale():
    assert format_date(date(2024, 1, 15)) == "15 Jan 2024"
    assert format_date(datetime(2024, 3, 5, 23, 0, tzinfo=timezone.utc)) == "5 Mar 2024"
    assert format_date("2024-12-01") == "1 Dec 2024"


def test_format_date_us_locale():
    config = config_with("en-US", day="numeric", month="long", year="numeric")
    assert format_date(date(2024, 1, 15), config) == "January 15, 2024"


def test_format_date_numeric():
    config = config_with("en-GB", day="2-digit", month="2-digit", year="numeric")
    assert format_date(date(2024, 1, 5), config) == "05/01/2024"
    us = config_with("en-US", day="numeric", month="numeric", year="2-digit")
    assert format_date(date(2024, 1, 5), us) == "1/5/24"


def test_format_date_partial_options():
    config = config_with("en-GB", month="long", year="numeric")
    assert format_date(date(2024, 7, 9), config) == "July 2024"


def test_format_date_unsupported_style():
    config = config_with("en-GB", day="ordinal")
    with pytest.raises(ValueError):
        format_date(date(2024, 1, 1), config)


def test_custom_site_config():
    config = SiteConfig(
        author="A",
        date=DateConfig(locale="en-GB"),
        description="D",
        lang="en",
        og_locale="en_US",
        title="T",
    )
    assert config.title == "T"
    assert format_date(date(2024, 1, 1), config) == ""
