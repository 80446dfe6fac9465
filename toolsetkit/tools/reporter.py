"""
Run reporting.

Renders the final status of every tool and maps it to the process exit
code, the signal CI consumes.
"""

from collections import Counter
from typing import Any, Dict, List, Optional, Sequence

from toolsetkit.tools.models import ToolState, ToolStatus

EXIT_OK = 0
EXIT_TOOL_FAILURE = 1
EXIT_CONFIG_ERROR = 2
EXIT_CANCELLED = 130

DEFAULT_MAX_OUTPUT = 800

_STATE_ICONS = {
    ToolState.SATISFIED: "✅",
    ToolState.INSTALL_FAILED: "❌",
    ToolState.VERIFY_FAILED: "❌",
    ToolState.MISSING: "⚠️ ",
    ToolState.OUT_OF_DATE: "⚠️ ",
    ToolState.UNKNOWN: "⏸️ ",
}


def truncate_output(output: Optional[str], limit: int = DEFAULT_MAX_OUTPUT) -> str:
    """
    Keep the tail of installer output, where the error usually is.

    Args:
        output: Captured output
        limit: Maximum number of characters kept

    Returns:
        Possibly shortened output
    """
    if not output:
        return ""
    output = output.strip()
    if len(output) <= limit:
        return output
    dropped = len(output) - limit
    return f"... ({dropped} characters truncated)\n{output[-limit:]}"


class Reporter:
    """Render tool statuses and compute the exit code."""

    def __init__(self, max_output: int = DEFAULT_MAX_OUTPUT):
        """
        Initialize reporter.

        Args:
            max_output: Characters of installer output kept per failed tool
        """
        self.max_output = max_output

    @staticmethod
    def exit_code(statuses: Sequence[ToolStatus]) -> int:
        """
        Exit code for a finished run.

        Returns:
            1 if any required tool ended in INSTALL_FAILED or VERIFY_FAILED,
            0 otherwise
        """
        if any(status.is_required_failure for status in statuses):
            return EXIT_TOOL_FAILURE
        return EXIT_OK

    @staticmethod
    def summary(statuses: Sequence[ToolStatus]) -> Dict[str, int]:
        """Count tools per final state."""
        counts = Counter(status.state.value for status in statuses)
        return {state.value: counts.get(state.value, 0) for state in ToolState}

    def render(self, statuses: Sequence[ToolStatus]) -> str:
        """
        Render a human-readable report.

        Every tool is listed with its final state; failures include the
        error and the tail of the installer output.
        """
        lines: List[str] = []
        width = max((len(s.name) for s in statuses), default=0)

        for status in statuses:
            icon = _STATE_ICONS[status.state]
            version = status.installed_version or "-"
            flag = "" if status.spec.required else " (optional)"
            lines.append(
                f"{icon} {status.name.ljust(width)}  {status.state.value:<14} "
                f"{version}{flag}"
            )

            if status.last_error and status.state is not ToolState.SATISFIED:
                lines.append(f"   {status.last_error}")

            if status.state.is_failure and status.install_output:
                for line in truncate_output(
                    status.install_output, self.max_output
                ).splitlines():
                    lines.append(f"   | {line}")

        counts = self.summary(statuses)
        failed = counts["install-failed"] + counts["verify-failed"]
        required_failed = sum(1 for s in statuses if s.is_required_failure)
        lines.append("")
        lines.append(
            f"📊 Summary: {counts['satisfied']} satisfied, {failed} failed "
            f"({required_failed} required), {len(statuses)} total"
        )
        return "\n".join(lines)

    def to_dict(self, statuses: Sequence[ToolStatus]) -> Dict[str, Any]:
        """Structured form of the report, for ``--json``."""
        return {
            "exit_code": self.exit_code(statuses),
            "summary": self.summary(statuses),
            "tools": [
                {
                    "name": status.name,
                    "state": status.state.value,
                    "required": status.spec.required,
                    "backend": status.spec.backend,
                    "min_version": status.spec.min_version,
                    "installed_version": status.installed_version,
                    "installer_invoked": status.installer_invoked,
                    "error": status.last_error,
                    "output": (
                        truncate_output(status.install_output, self.max_output)
                        if status.state.is_failure
                        else None
                    ),
                }
                for status in statuses
            ],
        }
