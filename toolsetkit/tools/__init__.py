"""
Tool probing, installation and orchestration.
"""

from toolsetkit.tools.models import (
    ToolSpec,
    ToolState,
    ToolStatus,
    ProbeResult,
    InstallResult,
)
from toolsetkit.tools.probe import Probe
from toolsetkit.tools.installer import Installer
from toolsetkit.tools.orchestrator import Orchestrator
from toolsetkit.tools.reporter import (
    Reporter,
    EXIT_OK,
    EXIT_TOOL_FAILURE,
    EXIT_CONFIG_ERROR,
    EXIT_CANCELLED,
)

__all__ = [
    "ToolSpec",
    "ToolState",
    "ToolStatus",
    "ProbeResult",
    "InstallResult",
    "Probe",
    "Installer",
    "Orchestrator",
    "Reporter",
    "EXIT_OK",
    "EXIT_TOOL_FAILURE",
    "EXIT_CONFIG_ERROR",
    "EXIT_CANCELLED",
]
