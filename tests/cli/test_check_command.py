"""
Tests for the check command.
"""

import json

import yaml

from toolsetkit.cli.parser import CLI


def _write(toolset_yaml, *tools):
    toolset_yaml(yaml.safe_dump({"tools": list(tools)}))


def _tool(python_cmd, name, probe_code, install_marker):
    return {
        "name": name,
        "probe": python_cmd(probe_code),
        "install": python_cmd(f"open({str(install_marker)!r}, 'w').close()"),
    }


class TestCheckCommand:
    """Test check end to end."""

    def test_all_present(self, tmp_path, toolset_yaml, python_cmd, capsys):
        marker = tmp_path / "installed"
        _write(toolset_yaml, _tool(python_cmd, "alpha", "print('alpha 3.1.4')", marker))

        result = CLI().run(["--project-root", str(tmp_path), "check"])

        assert result == 0
        out = capsys.readouterr().out
        assert "alpha" in out and "3.1.4" in out and "satisfied" in out

    def test_missing_tool_is_reported_not_installed(
        self, tmp_path, toolset_yaml, python_cmd, capsys
    ):
        marker = tmp_path / "installed"
        _write(
            toolset_yaml,
            _tool(python_cmd, "alpha", "import sys; sys.exit(1)", marker),
            _tool(python_cmd, "beta", "print('beta 1.0.0')", marker),
        )

        result = CLI().run(["--project-root", str(tmp_path), "check"])

        assert result == 1
        out = capsys.readouterr().out
        assert "missing" in out
        assert "tskit install" in out and "alpha" in out
        assert not marker.exists()

    def test_optional_missing_is_ok(self, tmp_path, toolset_yaml, python_cmd):
        marker = tmp_path / "installed"
        tool = _tool(python_cmd, "alpha", "import sys; sys.exit(1)", marker)
        tool["required"] = False
        _write(toolset_yaml, tool)

        assert CLI().run(["--project-root", str(tmp_path), "check"]) == 0

    def test_json_output(self, tmp_path, toolset_yaml, python_cmd, capsys):
        marker = tmp_path / "installed"
        tool = _tool(python_cmd, "alpha", "print('alpha 0.9.0')", marker)
        tool["min_version"] = "1.0.0"
        _write(toolset_yaml, tool)

        result = CLI().run(["--project-root", str(tmp_path), "check", "--json"])

        assert result == 1
        report = json.loads(capsys.readouterr().out)
        assert report["tools"][0]["state"] == "out-of-date"
        assert report["tools"][0]["installed_version"] == "0.9.0"
        assert report["tools"][0]["installer_invoked"] is False

    def test_config_error(self, tmp_path, toolset_yaml):
        toolset_yaml("tools: []\n")

        assert CLI().run(["--project-root", str(tmp_path), "check"]) == 2
