"""Configuration loading for Musings.

Settings live in ``musings.yaml`` at the project root. Every key is optional;
missing keys fall back to DEFAULT_CONFIG.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

CONFIG_FILENAME = "musings.yaml"

DEFAULT_CONFIG: dict[str, Any] = {
    "posts_dir": "posts",
    "output_dir": "public",
    "base_url": "http://localhost:8080",
    "title": "My Blog",
    "description": "A blog about technology and programming",
    "language": "en-us",
    "author": "",
    "theme_dir": None,
}


def load_config(
    project_root: Path, overrides: dict[str, Any] | None = None
) -> dict[str, Any]:
    """Load site configuration from musings.yaml.

    Args:
        project_root: Root directory of the project.
        overrides: Values that win over the file, e.g. from CLI options.
            None values are ignored.

    Returns:
        Dictionary containing configuration values, with defaults applied.
    """
    config_path = project_root / CONFIG_FILENAME
    config = DEFAULT_CONFIG.copy()
    if config_path.exists():
        with open(config_path, encoding="utf-8") as f:
            loaded = yaml.safe_load(f) or {}
            if isinstance(loaded, dict):
                config.update(loaded)
    if overrides:
        config.update({k: v for k, v in overrides.items() if v is not None})
    return config


def resolve_path(project_root: Path, value: str | Path | None) -> Path | None:
    """Resolve a configured path relative to the project root."""
    if value is None or value == "":
        return None
    path = Path(value)
    return path if path.is_absolute() else project_root / path
