"""
Read-only tool probing.

Runs a tool's version command and reports whether the tool is present and
which version it reports. A probe that fails in any way (non-zero exit,
missing executable, timeout) means "absent"; it never aborts the run.
"""

import logging
from typing import Optional

from toolsetkit.core.process import CancellationToken, run_command
from toolsetkit.core.versioning import extract_version
from toolsetkit.tools.models import ProbeResult, ToolSpec

logger = logging.getLogger(__name__)

DEFAULT_PROBE_TIMEOUT = 30.0


class Probe:
    """Check whether a tool is installed and at which version."""

    def __init__(
        self,
        timeout: float = DEFAULT_PROBE_TIMEOUT,
        cancel_token: Optional[CancellationToken] = None,
    ):
        """
        Initialize probe.

        Args:
            timeout: Seconds before a version command is abandoned
            cancel_token: Optional run-level cancellation token
        """
        self.timeout = timeout
        self.cancel_token = cancel_token

    def check(self, spec: ToolSpec) -> ProbeResult:
        """
        Probe a tool.

        Args:
            spec: Tool declaration

        Returns:
            ProbeResult; ``present`` is False on any failure
        """
        result = run_command(
            spec.probe_command, timeout=self.timeout, cancel_token=self.cancel_token
        )

        if result.cancelled:
            return ProbeResult(present=False, error=result.error, cancelled=True)

        if result.timed_out:
            logger.debug(f"{spec.name}: probe timed out after {self.timeout}s")
            return ProbeResult(present=False, error=result.error, timed_out=True)

        if result.exit_code != 0:
            error = result.error or f"probe exited with code {result.exit_code}"
            logger.debug(f"{spec.name}: not present ({error})")
            return ProbeResult(present=False, error=error)

        version = extract_version(result.output, spec.version_pattern)
        if version is None:
            logger.debug(f"{spec.name}: present, version not recognizable")
        else:
            logger.debug(f"{spec.name}: present, version {version}")
        return ProbeResult(present=True, version=version)
