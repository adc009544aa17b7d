"""YAML loading for prompt template files."""

from __future__ import annotations

from pathlib import Path

import yaml
from pydantic import ValidationError

from gemini_consistency.errors.exceptions import ConfigError
from gemini_consistency.types import PromptTemplate


def load_templates_yaml(path: str | Path) -> list[PromptTemplate]:
    """Load a templates YAML file (top-level ``templates:`` list)."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Templates YAML not found: {path}")

    with open(path) as f:
        raw = yaml.safe_load(f)

    if not isinstance(raw, dict) or not isinstance(raw.get("templates"), list):
        raise ConfigError(f"Invalid templates YAML: missing top-level 'templates' list in {path}")

    try:
        return [PromptTemplate(**item) for item in raw["templates"]]
    except (TypeError, ValidationError) as e:
        raise ConfigError(f"Invalid template entry in {path}: {e}") from e
