"""
Built-in tool set.

The developer QA tools a contributor needs before working on a Rust
project: a commit-hook runner, a dependency license/security auditor, a
spell checker, a changelog generator and a test runner. Used when no
configuration file is present.
"""

import sys
from typing import List

from toolsetkit.tools.models import ToolSpec

_PIP = (sys.executable, "-m", "pip")


def default_tool_specs() -> List[ToolSpec]:
    """Return the built-in tool declarations in installation order."""
    return [
        ToolSpec(
            name="pre-commit",
            probe_command=("pre-commit", "--version"),
            install_command=_PIP + ("install", "--upgrade", "pre-commit"),
            backend="pip",
            version_pattern=r"pre-commit (\S+)",
            description="Commit hook runner",
        ),
        ToolSpec(
            name="cargo-deny",
            probe_command=("cargo", "deny", "--version"),
            install_command=("cargo", "install", "--locked", "cargo-deny"),
            version_pattern=r"cargo-deny (\S+)",
            description="Dependency license and security auditor",
        ),
        ToolSpec(
            name="typos",
            probe_command=("typos", "--version"),
            install_command=("cargo", "install", "typos-cli"),
            version_pattern=r"typos-cli (\S+)",
            description="Source code spell checker",
        ),
        ToolSpec(
            name="git-cliff",
            probe_command=("git-cliff", "--version"),
            install_command=("cargo", "install", "git-cliff"),
            version_pattern=r"git-cliff (\S+)",
            description="Changelog generator",
        ),
        ToolSpec(
            name="cargo-nextest",
            probe_command=("cargo", "nextest", "--version"),
            install_command=("cargo", "install", "--locked", "cargo-nextest"),
            version_pattern=r"cargo-nextest (\S+)",
            description="Next-generation test runner",
        ),
    ]
