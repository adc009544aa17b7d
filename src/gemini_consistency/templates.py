"""Prompt template registry: builtin templates plus user YAML files."""

from __future__ import annotations

import logging
from pathlib import Path

from gemini_consistency.config.loader import load_templates_yaml
from gemini_consistency.types import PromptTemplate

logger = logging.getLogger(__name__)

_BUILTIN_TEMPLATES = Path(__file__).parent / "builtin" / "templates.yaml"


class TemplateRegistry:
    """Stores prompt templates by name; user files override builtins."""

    def __init__(self, user_paths: list[Path] | None = None) -> None:
        self._templates: dict[str, PromptTemplate] = {}
        self._sources: dict[str, bool] = {}  # name → is_builtin
        self._load(_BUILTIN_TEMPLATES, builtin=True)
        for path in user_paths or []:
            self._load(path, builtin=False)

    def get(self, name: str) -> PromptTemplate:
        if name not in self._templates:
            raise KeyError(f"Template '{name}' not found in registry")
        return self._templates[name]

    def has(self, name: str) -> bool:
        return name in self._templates

    def is_builtin(self, name: str) -> bool:
        return self._sources.get(name, False)

    def list_templates(self) -> list[PromptTemplate]:
        return list(self._templates.values())

    def _load(self, path: Path, builtin: bool) -> None:
        if not path.exists():
            return
        try:
            templates = load_templates_yaml(path)
        except Exception as e:
            logger.warning("Failed to load templates %s: %s", path, e)
            return
        for template in templates:
            self._templates[template.name] = template
            self._sources[template.name] = builtin
