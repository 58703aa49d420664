"""folio: content layer for a portfolio and blog static site.

This package declares the content collections of the site (posts, series
and projects), validates the front matter of every content file against
them, holds the site-wide configuration and produces the projects RSS feed.

The page renderer, templates and deployment are outside this package; they
query validated entries through ContentStore and read SITE_CONFIG.
"""

__all__ = ["__version__"]
__version__ = "0.1.0"
