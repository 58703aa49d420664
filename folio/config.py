"""Project configuration for folio.

Settings live in folio.yaml at the project root. Missing keys fall back to
DEFAULT_CONFIG.

Key settings:
- content_dir: Directory holding one sub-directory per collection.
- output_dir: Directory generated files (the feed) are written to.
- site: Deployed base URL, used for absolute feed links.
- image_root: Directory for root-relative image sources.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

CONFIG_FILENAME = "folio.yaml"

DEFAULT_CONFIG: dict[str, Any] = {
    "content_dir": "src/content",
    "output_dir": "dist",
    "site": "",
    "image_root": "public",
}


class ConfigError(Exception):
    """Raised when folio.yaml cannot be used."""


def load_config(project_root: Path) -> dict[str, Any]:
    """Load project configuration from folio.yaml.

    Args:
        project_root: Root directory of the project.

    Returns:
        Dictionary containing configuration values, with defaults applied.

    Raises:
        ConfigError: If the file is not valid YAML or not a mapping.
    """
    config_path = project_root / CONFIG_FILENAME
    config = DEFAULT_CONFIG.copy()
    if config_path.exists():
        with open(config_path, encoding="utf-8") as f:
            try:
                loaded = yaml.safe_load(f) or {}
            except yaml.YAMLError as exc:
                raise ConfigError(f"{config_path}: invalid YAML: {exc}") from exc
        if not isinstance(loaded, dict):
            raise ConfigError(f"{config_path}: expected a mapping at the top level")
        config.update(loaded)
    return config


def resolve_path(project_root: Path, config: dict[str, Any], key: str) -> Path:
    """Return a configured directory as an absolute path under the project root."""
    return project_root / str(config.get(key) or DEFAULT_CONFIG[key])
