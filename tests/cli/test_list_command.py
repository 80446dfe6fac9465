"""
Tests for the list command.
"""

from toolsetkit.cli.parser import CLI


class TestListCommand:
    """Test list output."""

    def test_builtin_tool_set(self, tmp_path, capsys):
        result = CLI().run(["--project-root", str(tmp_path), "list"])

        assert result == 0
        out = capsys.readouterr().out
        assert "built-in tool set" in out
        for name in ("pre-commit", "cargo-deny", "typos", "git-cliff", "cargo-nextest"):
            assert name in out
        assert "[cargo]" in out

    def test_configured_tools_in_order(self, tmp_path, toolset_yaml, capsys):
        path = toolset_yaml(
            """
tools:
  - name: zeta
    probe: zeta --version
    install: npm install -g zeta
    min_version: "2.0"
  - name: alpha
    probe: alpha --version
    install: cargo install alpha
    required: false
    description: First letter
"""
        )

        result = CLI().run(["--project-root", str(tmp_path), "list"])

        assert result == 0
        out = capsys.readouterr().out
        assert str(path) in out
        assert out.index("zeta") < out.index("alpha")
        assert ">= 2.0, required" in out
        assert "[npm]" in out
        assert "any version, optional - First letter" in out

    def test_invalid_config(self, tmp_path, toolset_yaml):
        toolset_yaml("version: 7\ntools: []\n")

        assert CLI().run(["--project-root", str(tmp_path), "list"]) == 2
