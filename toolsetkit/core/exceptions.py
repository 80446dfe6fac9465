"""
Centralized exception hierarchy for ToolsetKit.

Per-tool failures (probe timeouts, installer errors, failed verification)
are never raised: they are recorded on the tool's status. The exceptions
below cover the conditions that abort a run or indicate a programming error.
"""


# ============================================================================
# Base Exceptions
# ============================================================================


class ToolsetKitError(Exception):
    """Base exception for all ToolsetKit errors."""

    pass


# ============================================================================
# Configuration Exceptions
# ============================================================================


class ConfigError(ToolsetKitError):
    """Malformed tool declaration or configuration file."""

    pass


class DuplicateToolError(ConfigError):
    """Raised when two tool declarations share the same name."""

    def __init__(self, tool_name: str):
        self.tool_name = tool_name
        super().__init__(f"Duplicate tool declaration: {tool_name}")


class UnknownToolError(ConfigError):
    """Raised when a tool is selected by a name the registry does not know."""

    def __init__(self, tool_name: str, available=None):
        self.tool_name = tool_name
        msg = f"Unknown tool: {tool_name}"
        if available:
            msg += f" (available: {', '.join(available)})"
        super().__init__(msg)


# ============================================================================
# Run Exceptions
# ============================================================================


class RunCancelledError(ToolsetKitError):
    """Raised when the run was cancelled or its deadline expired."""

    def __init__(self, reason: str = "cancelled"):
        self.reason = reason
        super().__init__(reason)


class InvalidTransitionError(ToolsetKitError):
    """Raised when a tool status is moved against the state machine."""

    def __init__(self, tool_name: str, current, target):
        self.tool_name = tool_name
        self.current = current
        self.target = target
        super().__init__(
            f"Invalid state transition for {tool_name}: "
            f"{current.value} -> {target.value}"
        )


class RunLockTimeout(ToolsetKitError):
    """Raised when the run lock cannot be acquired within timeout."""

    pass
