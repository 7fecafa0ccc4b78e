"""YAML configuration loader with env var interpolation."""

from __future__ import annotations

import os
import re
from pathlib import Path

import yaml
from pydantic import ValidationError

from pagealign.config.defaults import CONFIG_FILE_NAMES, CONFIG_SEARCH_PATHS
from pagealign.config.models import PageAlignConfig
from pagealign.errors import SetupError
from pagealign.utils.logging import get_logger

log = get_logger(__name__)

_ENV_VAR_PATTERN = re.compile(r"\$\{(\w+)(?::([^}]*))?\}")


def _interpolate_env(value: str) -> str:
    """Replace ${VAR} or ${VAR:default} with environment variable values."""

    def _replace(match: re.Match[str]) -> str:
        default = match.group(2)
        return os.environ.get(match.group(1), default if default is not None else "")

    return _ENV_VAR_PATTERN.sub(_replace, value)


def _interpolate_tree(node: object) -> object:
    if isinstance(node, dict):
        return {key: _interpolate_tree(value) for key, value in node.items()}
    if isinstance(node, list):
        return [_interpolate_tree(item) for item in node]
    if isinstance(node, str):
        return _interpolate_env(node)
    return node


def find_config_file(explicit_path: str | Path | None = None) -> Path | None:
    """Return the config file to use; an explicit path must exist."""
    if explicit_path is not None:
        p = Path(explicit_path)
        if not p.is_file():
            raise SetupError(f"Config file not found: {p}")
        return p

    for search_dir in CONFIG_SEARCH_PATHS:
        for name in CONFIG_FILE_NAMES:
            candidate = search_dir / name
            if candidate.is_file():
                return candidate
    return None


def _read_mapping(config_path: Path) -> dict:
    try:
        raw = yaml.safe_load(config_path.read_text())
    except (OSError, yaml.YAMLError) as exc:
        raise SetupError(f"Cannot read config {config_path}: {exc}") from exc

    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise SetupError(f"Config {config_path} must be a mapping, got {type(raw).__name__}")
    return raw


def load_config(path: str | Path | None = None) -> PageAlignConfig:
    """Resolve settings from the config file, or defaults when none is found.

    Raises SetupError for a missing explicit file, unparsable YAML or values
    that fail validation.
    """
    config_path = find_config_file(path)
    if config_path is None:
        return PageAlignConfig()

    settings = _interpolate_tree(_read_mapping(config_path))
    try:
        config = PageAlignConfig.model_validate(settings)
    except ValidationError as exc:
        raise SetupError(f"Invalid config {config_path}: {exc}") from exc

    log.debug("config_loaded", path=str(config_path))
    return config
