"""
Tool installation through external package managers.

The installer runs the declared install command as-is; it knows nothing
about cargo, pip or any other backend. Install commands are expected to be
idempotent, so re-running one for an already installed tool is harmless.
"""

import logging
from typing import Optional

from toolsetkit.core.process import CancellationToken, run_command
from toolsetkit.tools.models import InstallResult, ToolSpec

logger = logging.getLogger(__name__)

# Installs may compile from source (cargo install) or fetch over the network
DEFAULT_INSTALL_TIMEOUT = 900.0


class Installer:
    """Run a tool's install command and capture the outcome."""

    def __init__(
        self,
        timeout: float = DEFAULT_INSTALL_TIMEOUT,
        cancel_token: Optional[CancellationToken] = None,
    ):
        """
        Initialize installer.

        Args:
            timeout: Seconds before an install command is terminated
            cancel_token: Optional run-level cancellation token
        """
        self.timeout = timeout
        self.cancel_token = cancel_token

    def install(self, spec: ToolSpec) -> InstallResult:
        """
        Install a tool.

        Never raises for installer failures; they are returned as a
        failed InstallResult.

        Args:
            spec: Tool declaration

        Returns:
            InstallResult with exit code and combined output
        """
        logger.info(f"Installing {spec.name}: {' '.join(spec.install_command)}")

        result = run_command(
            spec.install_command,
            timeout=self.timeout,
            cancel_token=self.cancel_token,
        )

        install_result = InstallResult(
            succeeded=result.ok,
            exit_code=result.exit_code,
            output=result.output,
            error=result.error,
            timed_out=result.timed_out,
            cancelled=result.cancelled,
            duration=result.duration,
        )

        if install_result.succeeded:
            logger.info(f"Installed {spec.name} in {result.duration:.1f}s")
        elif result.error:
            logger.warning(f"Install of {spec.name} failed: {result.error}")
        else:
            logger.warning(
                f"Install of {spec.name} failed with exit code {result.exit_code}"
            )

        return install_result
