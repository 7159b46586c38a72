"""
CLI 测试
"""

import pytest
from click.testing import CliRunner

from gdpath.cli import cli


@pytest.fixture
def runner():
    return CliRunner()


class TestCli:
    def test_init_writes_config(self, runner, project):
        result = runner.invoke(cli, ["init", "--project", str(project)])

        assert result.exit_code == 0
        assert (project / "gdpath.yaml").exists()

        again = runner.invoke(cli, ["init", "--project", str(project)])
        assert again.exit_code == 0
        assert "已存在" in again.output

    def test_generate(self, runner, project):
        result = runner.invoke(cli, ["generate", "--project", str(project), "--scene", "res://Main.tscn"])

        assert result.exit_code == 0, result.output
        content = (project / "script" / "gpg" / "MainPath.cs").read_text(encoding="utf-8")
        assert 'Main_World_Player = "/root/Main/World/Player";' in content
        assert (project / "script" / "gpg" / "Res.cs").exists()

    def test_generate_picks_latest_scene(self, runner, project):
        result = runner.invoke(cli, ["generate", "--project", str(project)])
        assert result.exit_code == 0, result.output
        assert (project / "script" / "gpg" / "MainPath.cs").exists()

    def test_generate_without_scene_fails(self, runner, tmp_path):
        result = runner.invoke(cli, ["generate", "--project", str(tmp_path)])
        assert result.exit_code == 1

    def test_generate_failure_exit_code(self, runner, project):
        (project / "Main.cs").unlink()
        result = runner.invoke(cli, ["generate", "--project", str(project)])
        assert result.exit_code == 1
        assert "MissingSourceFile" in result.output

    def test_status(self, runner, project):
        runner.invoke(cli, ["generate", "--project", str(project)])

        result = runner.invoke(cli, ["status", "--project", str(project)])

        assert result.exit_code == 0
        assert "res://Main.cs" in result.output
        assert "res://Main.tscn" in result.output

    def test_clean(self, runner, project):
        runner.invoke(cli, ["generate", "--project", str(project)])

        result = runner.invoke(cli, ["clean", "--project", str(project)])

        assert result.exit_code == 0
        assert not (project / "script" / "gpg" / "MainPath.cs").exists()
        assert not (project / "script" / "gpg" / "Res.cs").exists()
        assert not (project / ".gdpath_state.json").exists()

    def test_version(self, runner):
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
