"""Tests for the configuration hierarchy."""

import pytest

from gemini_consistency.config import hierarchy
from gemini_consistency.config.defaults import get_defaults
from gemini_consistency.config.hierarchy import load_config_hierarchy


@pytest.fixture
def project_dir(tmp_path, monkeypatch):
    """Empty working directory with no global config."""
    work = tmp_path / "work"
    work.mkdir()
    monkeypatch.chdir(work)
    monkeypatch.setattr(hierarchy, "GLOBAL_CONFIG_PATH", tmp_path / "missing" / "config.yaml")
    return work


class TestDefaults:
    def test_values(self):
        defaults = get_defaults()
        assert defaults["model"] == "gemini-2.5-flash"
        assert defaults["runs"] == 5
        assert defaults["temperature"] == 1.0
        assert defaults["top_p"] == 0.95
        assert defaults["timeout_ms"] == 15000
        assert defaults["delay_ms"] == 0
        assert defaults["max_retries"] == 3
        assert defaults["retry_delay_ms"] == 1000

    def test_fresh_copy(self):
        get_defaults()["runs"] = 99
        assert get_defaults()["runs"] == 5


class TestHierarchy:
    def test_defaults_only(self, project_dir):
        config = load_config_hierarchy()
        assert config["model"] == "gemini-2.5-flash"
        assert "api_key" not in config

    def test_global_then_project(self, project_dir, tmp_path, monkeypatch):
        global_path = tmp_path / "global.yaml"
        global_path.write_text("runs: 7\nmodel: gemini-global\n")
        monkeypatch.setattr(hierarchy, "GLOBAL_CONFIG_PATH", global_path)
        (project_dir / "gemini_consistency.yaml").write_text("model: gemini-project\n")

        config = load_config_hierarchy()

        assert config["runs"] == 7
        assert config["model"] == "gemini-project"

    def test_project_config_found_upward(self, project_dir, monkeypatch):
        (project_dir.parent / "gemini_consistency.yaml").write_text("delay_ms: 250\n")
        nested = project_dir / "a" / "b"
        nested.mkdir(parents=True)
        monkeypatch.chdir(nested)
        assert load_config_hierarchy()["delay_ms"] == 250

    def test_env_overrides_files(self, project_dir, monkeypatch):
        (project_dir / "gemini_consistency.yaml").write_text("runs: 3\n")
        monkeypatch.setenv("GEMINI_CONSISTENCY_RUNS", "9")
        monkeypatch.setenv("GEMINI_CONSISTENCY_TEMPERATURE", "0.2")

        config = load_config_hierarchy()

        assert config["runs"] == 9
        assert config["temperature"] == 0.2

    def test_runtime_overrides_win(self, project_dir, monkeypatch):
        monkeypatch.setenv("GEMINI_CONSISTENCY_RUNS", "9")
        config = load_config_hierarchy(runs=2, model=None)
        assert config["runs"] == 2
        assert config["model"] == "gemini-2.5-flash"

    def test_gemini_key_beats_google_key(self, project_dir, monkeypatch):
        monkeypatch.setenv("GOOGLE_API_KEY", "google-key")
        assert load_config_hierarchy()["api_key"] == "google-key"
        monkeypatch.setenv("GEMINI_API_KEY", "gemini-key")
        assert load_config_hierarchy()["api_key"] == "gemini-key"

    def test_bad_env_number_kept_as_string(self, project_dir, monkeypatch):
        monkeypatch.setenv("GEMINI_CONSISTENCY_TIMEOUT_MS", "soon")
        assert load_config_hierarchy()["timeout_ms"] == "soon"

    def test_non_mapping_yaml_ignored(self, project_dir):
        (project_dir / "gemini_consistency.yaml").write_text("- just\n- a list\n")
        assert load_config_hierarchy()["runs"] == 5
