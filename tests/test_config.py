"""
Config 测试
"""

import pytest
import yaml

from gdpath.core.config import Config, DEFAULT_CONFIG


class TestConfig:
    def test_defaults_without_file(self, tmp_path):
        config = Config(project_path=str(tmp_path))

        assert not config.exists()
        assert config.output_dir == "res://script/gpg"
        assert config.output_extension == "cs"
        assert config.namespace == "GPG"
        assert config.resource_class == "Res"
        assert config.script_extensions == [".cs"]
        assert config.resource_extensions == [".tscn"]
        assert config.debounce_seconds == pytest.approx(0.1)
        assert config.persist_state is True
        assert config.state_file == tmp_path / ".gdpath_state.json"

    def test_save_and_reload(self, tmp_path):
        config = Config(project_path=str(tmp_path))
        config.set("output.dir", "res://generated/gpg/")
        config.save()

        reloaded = Config(project_path=str(tmp_path))
        assert reloaded.exists()
        assert reloaded.output_dir == "res://generated/gpg"

    def test_partial_file_is_merged_with_defaults(self, tmp_path):
        (tmp_path / "gdpath.yaml").write_text(
            yaml.dump({"watch": {"debounce_ms": 250}}), encoding="utf-8"
        )
        config = Config(project_path=str(tmp_path))

        assert config.debounce_seconds == pytest.approx(0.25)
        assert config.ignore_dirs == DEFAULT_CONFIG["watch"]["ignore_dirs"]
        assert config.namespace == "GPG"

    def test_defaults_are_not_shared(self, tmp_path):
        config = Config(project_path=str(tmp_path))
        config.set("output.namespace", "Changed")
        assert DEFAULT_CONFIG["output"]["namespace"] == "GPG"

    def test_explicit_config_path(self, tmp_path):
        config_path = tmp_path / "custom.yaml"
        config_path.write_text(yaml.dump({"output": {"namespace": "Paths"}}), encoding="utf-8")

        config = Config(config_path=str(config_path))
        assert config.namespace == "Paths"
        assert config.project_path == tmp_path

    def test_environment_variable(self, tmp_path, monkeypatch):
        monkeypatch.setenv("GDPATH_PROJECT", str(tmp_path))
        config = Config()
        assert config.config_path == tmp_path / "gdpath.yaml"

    def test_missing_location(self, monkeypatch):
        monkeypatch.delenv("GDPATH_PROJECT", raising=False)
        with pytest.raises(ValueError):
            Config()

    def test_invalid_file(self, tmp_path):
        (tmp_path / "gdpath.yaml").write_text("- just\n- a list\n", encoding="utf-8")
        with pytest.raises(ValueError):
            Config(project_path=str(tmp_path))

    def test_get_with_default(self, tmp_path):
        config = Config(project_path=str(tmp_path))
        assert config.get("output.missing", "fallback") == "fallback"
        assert config.get("output.dir.deeper", "fallback") == "fallback"

    def test_set_replaces_scalar_parent(self, tmp_path):
        config = Config(project_path=str(tmp_path))
        config.set("project", "flat")
        config.set("project.name", "Game")
        assert config.get("project.name") == "Game"
