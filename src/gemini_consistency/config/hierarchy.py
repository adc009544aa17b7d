"""Layered settings for gemini-consistency.

Layers, lowest priority first:
  1. Package defaults
  2. User file      ~/.gemini_consistency/config.yaml
  3. Project file   gemini_consistency.yaml in the working directory or above
  4. Environment    GEMINI_API_KEY / GOOGLE_API_KEY and GEMINI_CONSISTENCY_*
  5. Keyword overrides passed by the caller (``None`` means "not given")
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterator, Mapping
from pathlib import Path
from typing import Any

import yaml

from gemini_consistency.config.defaults import get_defaults

logger = logging.getLogger(__name__)

GLOBAL_CONFIG_PATH = Path.home() / ".gemini_consistency" / "config.yaml"
PROJECT_CONFIG_NAME = "gemini_consistency.yaml"

_ENV_PREFIX = "GEMINI_CONSISTENCY_"

# Both key variables feed api_key; GEMINI_API_KEY is read last so it wins.
_API_KEY_VARS = ("GOOGLE_API_KEY", "GEMINI_API_KEY")

# Suffix after GEMINI_CONSISTENCY_ -> (settings key, parser)
_ENV_SETTINGS: dict[str, tuple[str, type]] = {
    "MODEL": ("model", str),
    "BASE_URL": ("base_url", str),
    "RUNS": ("runs", int),
    "TEMPERATURE": ("temperature", float),
    "TOP_P": ("top_p", float),
    "TIMEOUT_MS": ("timeout_ms", int),
    "DELAY_MS": ("delay_ms", int),
    "MAX_RETRIES": ("max_retries", int),
    "RETRY_DELAY_MS": ("retry_delay_ms", int),
    "SETTINGS_DB": ("settings_db", str),
    "TEMPLATES": ("templates_path", str),
    "LOG_LEVEL": ("log_level", str),
}


def load_config_hierarchy(**runtime_overrides: Any) -> dict[str, Any]:
    """Resolve the effective settings by stacking every layer onto the defaults."""
    settings = get_defaults()
    for source, layer in _layers():
        if layer:
            logger.debug("Applying %d setting(s) from %s", len(layer), source)
            settings.update(layer)
    settings.update({k: v for k, v in runtime_overrides.items() if v is not None})
    return settings


def _layers() -> Iterator[tuple[str, dict[str, Any]]]:
    yield str(GLOBAL_CONFIG_PATH), _read_yaml_mapping(GLOBAL_CONFIG_PATH)
    project_file = _locate_project_file(Path.cwd())
    if project_file is not None:
        yield str(project_file), _read_yaml_mapping(project_file)
    yield "environment", _env_layer(os.environ)


def _read_yaml_mapping(path: Path) -> dict[str, Any]:
    if not path.is_file():
        return {}
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError) as e:
        logger.warning("Ignoring unreadable settings file %s: %s", path, e)
        return {}
    if data is None:
        return {}
    if not isinstance(data, dict):
        logger.warning("Ignoring settings file %s: top level is not a mapping", path)
        return {}
    return data


def _locate_project_file(start: Path) -> Path | None:
    """Nearest gemini_consistency.yaml at or above ``start``."""
    for directory in (start, *start.parents):
        candidate = directory / PROJECT_CONFIG_NAME
        if candidate.is_file():
            return candidate
    return None


def _env_layer(environ: Mapping[str, str]) -> dict[str, Any]:
    layer: dict[str, Any] = {}
    for var in _API_KEY_VARS:
        if environ.get(var):
            layer["api_key"] = environ[var]

    for suffix, (key, parser) in _ENV_SETTINGS.items():
        raw = environ.get(_ENV_PREFIX + suffix)
        if raw:
            layer[key] = _parse_env(_ENV_PREFIX + suffix, raw, parser)
    return layer


def _parse_env(var: str, raw: str, parser: type) -> Any:
    """Parse a numeric variable; unparseable values are kept as text."""
    try:
        return parser(raw)
    except ValueError:
        logger.warning("%s=%r is not a valid %s, using it as text", var, raw, parser.__name__)
        return raw
