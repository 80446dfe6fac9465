"""
Tests for the init command.
"""

from unittest.mock import Mock

from toolsetkit.cli.commands import init
from toolsetkit.config.defaults import default_tool_specs
from toolsetkit.config.parser import parse_config


def _args(tmp_path, force=False, config=None):
    return Mock(project_root=str(tmp_path), force=force, config=config)


class TestInitCommand:
    """Test init."""

    def test_writes_builtin_tool_set(self, tmp_path):
        result = init.run(_args(tmp_path))

        assert result == 0
        config_file = tmp_path / "toolset.yaml"
        assert config_file.read_text(encoding="utf-8").startswith("# ToolsetKit")

        config = parse_config(config_file)
        assert config.registry.list() == default_tool_specs()

    def test_refuses_to_overwrite(self, tmp_path, capsys):
        config_file = tmp_path / "toolset.yaml"
        config_file.write_text("tools: []\n", encoding="utf-8")

        result = init.run(_args(tmp_path))

        assert result == 1
        assert "already exists" in capsys.readouterr().err
        assert config_file.read_text(encoding="utf-8") == "tools: []\n"

    def test_force_overwrites(self, tmp_path):
        config_file = tmp_path / "toolset.yaml"
        config_file.write_text("tools: []\n", encoding="utf-8")

        result = init.run(_args(tmp_path, force=True))

        assert result == 0
        assert len(parse_config(config_file).registry) == 5

    def test_custom_path(self, tmp_path):
        target = tmp_path / "ci" / "tools.yaml"

        result = init.run(_args(tmp_path, config=str(target)))

        assert result == 0
        assert target.exists()
        assert not (tmp_path / "toolset.yaml").exists()
