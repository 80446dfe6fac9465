"""
Data model for tool bootstrapping.

Classes:
    ToolSpec: Immutable declaration of one installable developer tool
    ToolState: States of the per-tool state machine
    ToolStatus: Per-run result for one tool
    ProbeResult: Outcome of a version probe
    InstallResult: Outcome of an install command
"""

import logging
import os
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, FrozenSet, Optional, Tuple

from toolsetkit.core.exceptions import ConfigError, InvalidTransitionError

logger = logging.getLogger(__name__)


def default_backend(install_command: Tuple[str, ...]) -> str:
    """
    Name the installer backend an install command drives.

    ``python -m pip`` resolves to the module, so it shares a lane with a
    plain ``pip``. Interpreter-style version suffixes are dropped
    (``pip3.11`` is ``pip``).

    Example:
        >>> default_backend(("/usr/bin/python3", "-m", "pip", "install", "x"))
        'pip'
        >>> default_backend(("cargo", "install", "typos-cli"))
        'cargo'
    """
    executable = install_command[0]
    if len(install_command) > 2 and install_command[1] == "-m":
        executable = install_command[2]
    name = os.path.basename(executable)
    if name.lower().endswith(".exe"):
        name = name[:-4]
    return re.sub(r"\d+(\.\d+)*$", "", name) or name


# =============================================================================
# Tool Declaration
# =============================================================================


@dataclass(frozen=True)
class ToolSpec:
    """
    Declaration of one developer tool.

    Attributes:
        name: Unique identifier (e.g., 'typos')
        probe_command: Argument vector printing the installed version
        install_command: Argument vector installing the tool; must be
            safe to re-run
        min_version: Optional version floor (e.g., '1.16.0')
        required: Whether a failure of this tool fails the run
        backend: Installer backend name (defaults to the install
            executable's basename, e.g. 'cargo')
        version_pattern: Optional regex picking the version from probe output
        description: Optional human-readable description

    Example:
        spec = ToolSpec(
            name='typos',
            probe_command=('typos', '--version'),
            install_command=('cargo', 'install', 'typos-cli'),
            min_version='1.16.0',
        )
    """

    name: str
    probe_command: Tuple[str, ...]
    install_command: Tuple[str, ...]
    min_version: Optional[str] = None
    required: bool = True
    backend: Optional[str] = None
    version_pattern: Optional[str] = None
    description: Optional[str] = None

    def __post_init__(self):
        """Validate and normalize the declaration."""
        if not self.name or not str(self.name).strip():
            raise ConfigError("Tool name cannot be empty")

        for attr in ("probe_command", "install_command"):
            value = getattr(self, attr)
            if isinstance(value, str) or not value:
                raise ConfigError(
                    f"{self.name}: {attr} must be a non-empty argument list"
                )
            object.__setattr__(self, attr, tuple(str(part) for part in value))

        if not isinstance(self.required, bool):
            raise ConfigError(f"{self.name}: required must be true or false")

        if self.min_version is not None:
            object.__setattr__(self, "min_version", str(self.min_version).strip())
            if not self.min_version:
                object.__setattr__(self, "min_version", None)

        if self.version_pattern:
            try:
                re.compile(self.version_pattern)
            except (re.error, TypeError) as e:
                raise ConfigError(
                    f"{self.name}: invalid version_pattern {self.version_pattern!r}: {e}"
                )

        if self.backend is not None and not isinstance(self.backend, str):
            raise ConfigError(f"{self.name}: backend must be a string")
        if not self.backend:
            object.__setattr__(self, "backend", default_backend(self.install_command))


# =============================================================================
# State Machine
# =============================================================================


class ToolState(Enum):
    """States a tool moves through during one run."""

    UNKNOWN = "unknown"
    MISSING = "missing"
    OUT_OF_DATE = "out-of-date"
    SATISFIED = "satisfied"
    INSTALL_FAILED = "install-failed"
    VERIFY_FAILED = "verify-failed"

    @property
    def is_terminal(self) -> bool:
        return self in TERMINAL_STATES

    @property
    def is_failure(self) -> bool:
        return self in FAILURE_STATES


TERMINAL_STATES: FrozenSet[ToolState] = frozenset(
    {ToolState.SATISFIED, ToolState.INSTALL_FAILED, ToolState.VERIFY_FAILED}
)

FAILURE_STATES: FrozenSet[ToolState] = frozenset(
    {ToolState.INSTALL_FAILED, ToolState.VERIFY_FAILED}
)

# UNKNOWN -> INSTALL_FAILED only happens when the run is cancelled during
# the first probe
TRANSITIONS: Dict[ToolState, FrozenSet[ToolState]] = {
    ToolState.UNKNOWN: frozenset(
        {
            ToolState.MISSING,
            ToolState.OUT_OF_DATE,
            ToolState.SATISFIED,
            ToolState.INSTALL_FAILED,
        }
    ),
    ToolState.MISSING: frozenset(
        {ToolState.SATISFIED, ToolState.INSTALL_FAILED, ToolState.VERIFY_FAILED}
    ),
    ToolState.OUT_OF_DATE: frozenset(
        {ToolState.SATISFIED, ToolState.INSTALL_FAILED, ToolState.VERIFY_FAILED}
    ),
    ToolState.SATISFIED: frozenset(),
    ToolState.INSTALL_FAILED: frozenset(),
    ToolState.VERIFY_FAILED: frozenset(),
}


@dataclass
class ToolStatus:
    """
    Runtime result for one tool within one run.

    Only the orchestrator mutates a status, and only through
    :meth:`transition`.
    """

    spec: ToolSpec
    state: ToolState = ToolState.UNKNOWN
    installed_version: Optional[str] = None
    last_error: Optional[str] = None
    install_output: Optional[str] = None
    installer_invoked: bool = False

    @property
    def name(self) -> str:
        return self.spec.name

    @property
    def is_required_failure(self) -> bool:
        return self.spec.required and self.state.is_failure

    def transition(
        self,
        target: ToolState,
        version: Optional[str] = None,
        error: Optional[str] = None,
    ):
        """
        Move to a new state.

        Args:
            target: State to move to
            version: Installed version observed, if any
            error: Error message to record, if any

        Raises:
            InvalidTransitionError: If the move is not allowed from the
                current state
        """
        if target not in TRANSITIONS[self.state]:
            raise InvalidTransitionError(self.spec.name, self.state, target)

        logger.debug(f"{self.spec.name}: {self.state.value} -> {target.value}")
        self.state = target
        if version is not None:
            self.installed_version = version
        if error is not None:
            self.last_error = error


# =============================================================================
# Step Results
# =============================================================================


@dataclass
class ProbeResult:
    """Outcome of probing a tool's installed version."""

    present: bool
    version: Optional[str] = None
    error: Optional[str] = None
    timed_out: bool = False
    cancelled: bool = False


@dataclass
class InstallResult:
    """Outcome of running a tool's install command."""

    succeeded: bool
    exit_code: int
    output: str = ""
    error: Optional[str] = None
    timed_out: bool = False
    cancelled: bool = False
    duration: float = field(default=0.0)
