"""
Tests for Installer.
"""

from unittest.mock import patch

from toolsetkit.core.process import CommandResult
from toolsetkit.tools.installer import DEFAULT_INSTALL_TIMEOUT, Installer
from toolsetkit.tools.probe import DEFAULT_PROBE_TIMEOUT


class TestInstaller:
    """Test Installer.install."""

    def test_install_timeout_longer_than_probe(self):
        assert DEFAULT_INSTALL_TIMEOUT > DEFAULT_PROBE_TIMEOUT

    def test_success(self, make_spec, python_cmd):
        spec = make_spec(
            "tool", install_command=python_cmd("print('Installed package tool v1.0.0')")
        )

        result = Installer(timeout=30).install(spec)

        assert result.succeeded is True
        assert result.exit_code == 0
        assert "Installed package" in result.output

    def test_failure_captures_output(self, make_spec, python_cmd):
        spec = make_spec(
            "tool",
            install_command=python_cmd(
                "import sys; print('error: could not compile'); sys.exit(101)"
            ),
        )

        result = Installer(timeout=30).install(spec)

        assert result.succeeded is False
        assert result.exit_code == 101
        assert "could not compile" in result.output

    def test_missing_installer_never_raises(self, make_spec):
        spec = make_spec("tool", install_command=("no-such-package-manager", "install"))

        result = Installer(timeout=5).install(spec)

        assert result.succeeded is False
        assert "command not found" in result.error

    def test_idempotent_rerun(self, make_spec, python_cmd):
        spec = make_spec("tool", install_command=python_cmd("print('already installed')"))
        installer = Installer(timeout=30)

        first = installer.install(spec)
        second = installer.install(spec)

        assert first.succeeded and second.succeeded

    def test_timeout_reported(self, make_spec):
        timed_out = CommandResult(
            argv=["cargo"],
            exit_code=-15,
            output="Compiling...",
            duration=5.0,
            timed_out=True,
            error="timed out after 5s",
        )
        with patch("toolsetkit.tools.installer.run_command", return_value=timed_out):
            result = Installer(timeout=5).install(make_spec())

        assert result.succeeded is False
        assert result.timed_out is True
        assert result.output == "Compiling..."
