"""Tests for template loading and the template registry."""

import pytest

from gemini_consistency.config.loader import load_templates_yaml
from gemini_consistency.errors.exceptions import ConfigError
from gemini_consistency.templates import TemplateRegistry


class TestLoadTemplatesYaml:
    def test_loads_entries(self, tmp_path):
        path = tmp_path / "t.yaml"
        path.write_text(
            "templates:\n"
            "  - name: greet\n"
            "    prompt: Say hello.\n"
            "    description: Greeting\n"
        )
        templates = load_templates_yaml(path)
        assert len(templates) == 1
        assert templates[0].name == "greet"
        assert templates[0].prompt == "Say hello."

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_templates_yaml(tmp_path / "nope.yaml")

    def test_missing_templates_key(self, tmp_path):
        path = tmp_path / "t.yaml"
        path.write_text("prompts: []\n")
        with pytest.raises(ConfigError):
            load_templates_yaml(path)

    def test_bad_entry(self, tmp_path):
        path = tmp_path / "t.yaml"
        path.write_text("templates:\n  - description: no name or prompt\n")
        with pytest.raises(ConfigError):
            load_templates_yaml(path)


class TestTemplateRegistry:
    def test_builtins_loaded(self):
        registry = TemplateRegistry()
        assert registry.has("capital-city")
        assert registry.is_builtin("capital-city")
        assert "France" in registry.get("capital-city").prompt
        assert len(registry.list_templates()) >= 5

    def test_unknown_template(self):
        with pytest.raises(KeyError):
            TemplateRegistry().get("does-not-exist")

    def test_user_file_overrides_builtin(self, tmp_path):
        path = tmp_path / "mine.yaml"
        path.write_text(
            "templates:\n"
            "  - name: capital-city\n"
            "    prompt: What is the capital of Italy?\n"
            "  - name: custom\n"
            "    prompt: Count to three.\n"
        )
        registry = TemplateRegistry(user_paths=[path])

        assert registry.get("capital-city").prompt == "What is the capital of Italy?"
        assert not registry.is_builtin("capital-city")
        assert registry.has("custom")

    def test_broken_user_file_is_skipped(self, tmp_path):
        path = tmp_path / "broken.yaml"
        path.write_text("not: [valid")
        registry = TemplateRegistry(user_paths=[path])
        assert registry.has("capital-city")
