"""
Pytest configuration and shared fixtures for ToolsetKit tests.
"""

import sys
from typing import Dict, List, Optional

import pytest

from toolsetkit.tools.models import InstallResult, ProbeResult, ToolSpec


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )


# ============================================================================
# Scripted collaborators
# ============================================================================


class ScriptedProbe:
    """
    Probe double returning queued results per tool.

    Each call to ``check`` pops the next result for the tool; the last
    result repeats once the queue is down to one entry.
    """

    def __init__(self, script: Optional[Dict[str, List[ProbeResult]]] = None):
        self.script = {name: list(results) for name, results in (script or {}).items()}
        self.calls: List[str] = []

    def check(self, spec: ToolSpec) -> ProbeResult:
        self.calls.append(spec.name)
        queue = self.script.get(spec.name)
        if not queue:
            return ProbeResult(present=False, error="not scripted")
        if len(queue) > 1:
            return queue.pop(0)
        return queue[0]


class ScriptedInstaller:
    """
    Installer double returning fixed results per tool.

    ``on_install`` lets a test simulate side effects (such as the tool
    appearing on PATH, or the run being cancelled mid-install).
    """

    def __init__(self, results: Optional[Dict[str, InstallResult]] = None, on_install=None):
        self.results = dict(results or {})
        self.on_install = on_install
        self.calls: List[str] = []

    def install(self, spec: ToolSpec) -> InstallResult:
        self.calls.append(spec.name)
        if self.on_install:
            self.on_install(spec)
        return self.results.get(
            spec.name, InstallResult(succeeded=True, exit_code=0, output="installed")
        )


def present(version: Optional[str] = None) -> ProbeResult:
    return ProbeResult(present=True, version=version)


def absent(error: str = "command not found") -> ProbeResult:
    return ProbeResult(present=False, error=error)


# ============================================================================
# Shared Test Fixtures
# ============================================================================


@pytest.fixture
def make_spec():
    """Factory for ToolSpec with sensible defaults."""

    def _make(name: str = "typos", **kwargs) -> ToolSpec:
        kwargs.setdefault("probe_command", (name, "--version"))
        kwargs.setdefault("install_command", ("cargo", "install", name))
        return ToolSpec(name=name, **kwargs)

    return _make


@pytest.fixture
def scripted():
    """Access to the scripted doubles and probe-result helpers."""

    class Helpers:
        Probe = ScriptedProbe
        Installer = ScriptedInstaller

    Helpers.present = staticmethod(present)
    Helpers.absent = staticmethod(absent)
    return Helpers


@pytest.fixture
def python_cmd():
    """Build an argument vector running a Python snippet."""

    def _cmd(code: str) -> List[str]:
        return [sys.executable, "-c", code]

    return _cmd


@pytest.fixture
def toolset_yaml(tmp_path):
    """Write a toolset.yaml into a temporary project root."""

    def _write(content: str, name: str = "toolset.yaml"):
        path = tmp_path / name
        path.write_text(content, encoding="utf-8")
        return path

    return _write
