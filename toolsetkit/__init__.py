"""
ToolsetKit - bootstrap the developer tools a project needs.

Declares a set of tools, probes which are missing or outdated, installs
them through their package managers and verifies the result.
"""

from toolsetkit.config import ToolRegistry, load_config
from toolsetkit.tools import (
    Installer,
    Orchestrator,
    Probe,
    Reporter,
    ToolSpec,
    ToolState,
    ToolStatus,
)

__version__ = "0.1.0"

__all__ = [
    "Installer",
    "Orchestrator",
    "Probe",
    "Reporter",
    "ToolRegistry",
    "ToolSpec",
    "ToolState",
    "ToolStatus",
    "load_config",
]
