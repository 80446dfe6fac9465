"""
Tool bootstrap orchestration.

Drives every declared tool through its state machine::

    UNKNOWN --probe--> MISSING | OUT_OF_DATE | SATISFIED
    MISSING | OUT_OF_DATE --install fails--> INSTALL_FAILED
    MISSING | OUT_OF_DATE --install ok, re-probe ok--> SATISFIED
    MISSING | OUT_OF_DATE --install ok, re-probe bad--> VERIFY_FAILED

All tools are processed even after one fails, so a single run reports the
complete picture. Only cancellation stops processing early: the in-flight
tool is marked failed with a ``cancelled:`` error and the remaining tools
stay UNKNOWN.

By default tools run strictly one after another. With ``jobs > 1`` tools
are grouped into lanes by installer backend; a lane is always sequential
(backends share caches and lock files), distinct lanes run concurrently.
"""

import concurrent.futures
import logging
from collections import OrderedDict
from typing import Iterable, List, Optional

from toolsetkit.core.exceptions import RunCancelledError
from toolsetkit.core.process import CancellationToken
from toolsetkit.core.versioning import satisfies_minimum
from toolsetkit.tools.installer import Installer
from toolsetkit.tools.models import ProbeResult, ToolSpec, ToolState, ToolStatus
from toolsetkit.tools.probe import Probe

logger = logging.getLogger(__name__)

NOT_PROCESSED = "cancelled: not processed"


class Orchestrator:
    """
    Converge the environment toward a declared tool set.

    Example:
        >>> orchestrator = Orchestrator()
        >>> statuses = orchestrator.run(registry.list())
        >>> [s.state for s in statuses]
        [<ToolState.SATISFIED: 'satisfied'>, ...]
    """

    def __init__(
        self,
        probe: Optional[Probe] = None,
        installer: Optional[Installer] = None,
        cancel_token: Optional[CancellationToken] = None,
        jobs: int = 1,
    ):
        """
        Initialize orchestrator.

        Args:
            probe: Probe to use (default: Probe sharing cancel_token)
            installer: Installer to use (default: Installer sharing cancel_token)
            cancel_token: Run-level cancellation token
            jobs: Maximum number of backend lanes run concurrently (1 means
                strictly sequential)
        """
        if jobs < 1:
            raise ValueError(f"jobs must be at least 1, got {jobs}")

        self.cancel_token = cancel_token or CancellationToken()
        self.probe = probe or Probe(cancel_token=self.cancel_token)
        self.installer = installer or Installer(cancel_token=self.cancel_token)
        self.jobs = jobs

    @property
    def cancelled(self) -> bool:
        return self.cancel_token.cancelled

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def run(self, specs: Iterable[ToolSpec]) -> List[ToolStatus]:
        """
        Probe, install and verify every tool.

        Args:
            specs: Tool declarations in registry order

        Returns:
            One ToolStatus per tool, in registry order
        """
        statuses = [ToolStatus(spec=spec) for spec in specs]
        self._execute(statuses, self._converge)
        return statuses

    def check(self, specs: Iterable[ToolSpec]) -> List[ToolStatus]:
        """
        Probe every tool without installing anything.

        Each status stops at its first probe outcome (MISSING, OUT_OF_DATE
        or SATISFIED).

        Args:
            specs: Tool declarations in registry order

        Returns:
            One ToolStatus per tool, in registry order
        """
        statuses = [ToolStatus(spec=spec) for spec in specs]
        self._execute(statuses, self._probe_only)
        return statuses

    # ------------------------------------------------------------------
    # Scheduling
    # ------------------------------------------------------------------

    def _execute(self, statuses: List[ToolStatus], step):
        lanes = self._plan_lanes(statuses)

        if self.jobs == 1 or len(lanes) == 1:
            try:
                for lane in lanes:
                    if not self._run_lane(lane, step):
                        break
            except KeyboardInterrupt:
                self.cancel_token.cancel("interrupted by user")
        else:
            self._run_lanes_concurrently(lanes, step)

        if self.cancelled:
            for status in statuses:
                if status.state is ToolState.UNKNOWN and status.last_error is None:
                    status.last_error = NOT_PROCESSED
            logger.warning(f"Run cancelled: {self.cancel_token.reason}")

    def _plan_lanes(self, statuses: List[ToolStatus]) -> List[List[ToolStatus]]:
        """Group statuses by installer backend, keeping registry order."""
        if self.jobs == 1:
            return [statuses]

        lanes: "OrderedDict[str, List[ToolStatus]]" = OrderedDict()
        for status in statuses:
            lanes.setdefault(status.spec.backend, []).append(status)
        logger.debug(
            f"Planned {len(lanes)} backend lane(s): {', '.join(lanes.keys())}"
        )
        return list(lanes.values())

    def _run_lanes_concurrently(self, lanes: List[List[ToolStatus]], step):
        workers = min(self.jobs, len(lanes))
        with concurrent.futures.ThreadPoolExecutor(max_workers=workers) as pool:
            futures = [pool.submit(self._run_lane, lane, step) for lane in lanes]
            try:
                for future in concurrent.futures.as_completed(futures):
                    future.result()
            except KeyboardInterrupt:
                # Workers poll the token and terminate their processes
                self.cancel_token.cancel("interrupted by user")

    def _run_lane(self, lane: List[ToolStatus], step) -> bool:
        """
        Process one lane sequentially.

        Returns:
            False if the run was cancelled while processing this lane
        """
        for status in lane:
            if self.cancelled:
                return False
            try:
                step(status)
            except RunCancelledError as e:
                logger.warning(f"{status.name}: {e}")
                self.cancel_token.cancel(e.reason)
                return False
            except KeyboardInterrupt:
                self.cancel_token.cancel("interrupted by user")
                self._abort(status, "cancelled: interrupted by user")
                return False
        return True

    # ------------------------------------------------------------------
    # Per-tool steps
    # ------------------------------------------------------------------

    def _probe_only(self, status: ToolStatus):
        probe = self.probe.check(status.spec)
        if probe.cancelled:
            self._abort(status, self._cancel_message(probe.error))
            raise RunCancelledError(status.last_error)
        status.transition(self._classify(status.spec, probe), version=probe.version)

    def _converge(self, status: ToolStatus):
        spec = status.spec

        probe = self.probe.check(spec)
        if probe.cancelled:
            self._abort(status, self._cancel_message(probe.error))
            raise RunCancelledError(status.last_error)

        status.transition(self._classify(spec, probe), version=probe.version)
        if status.state is ToolState.SATISFIED:
            logger.info(f"{spec.name}: satisfied ({probe.version or 'version unknown'})")
            return

        logger.info(f"{spec.name}: {self._describe(status, probe)}, installing")
        result = self.installer.install(spec)
        status.installer_invoked = True
        status.install_output = result.output

        if not result.succeeded:
            if result.cancelled:
                status.transition(
                    ToolState.INSTALL_FAILED, error=self._cancel_message(result.error)
                )
                raise RunCancelledError(status.last_error)
            error = result.error or f"installer exited with code {result.exit_code}"
            status.transition(ToolState.INSTALL_FAILED, error=error)
            logger.error(f"{spec.name}: install failed: {error}")
            return

        verify = self.probe.check(spec)
        if verify.cancelled:
            status.transition(
                ToolState.VERIFY_FAILED, error=self._cancel_message(verify.error)
            )
            raise RunCancelledError(status.last_error)

        if self._classify(spec, verify) is ToolState.SATISFIED:
            status.transition(ToolState.SATISFIED, version=verify.version)
            logger.info(f"{spec.name}: installed {verify.version or ''}".rstrip())
            return

        if not verify.present:
            error = (
                "install reported success but the tool is still not found "
                "(check PATH)"
            )
        else:
            error = (
                f"install reported success but version "
                f"{verify.version or 'unknown'} is still below {spec.min_version}"
            )
        status.transition(ToolState.VERIFY_FAILED, version=verify.version, error=error)
        logger.error(f"{spec.name}: {error}")

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _classify(spec: ToolSpec, probe: ProbeResult) -> ToolState:
        if not probe.present:
            return ToolState.MISSING
        if satisfies_minimum(probe.version, spec.min_version):
            return ToolState.SATISFIED
        return ToolState.OUT_OF_DATE

    @staticmethod
    def _describe(status: ToolStatus, probe: ProbeResult) -> str:
        if status.state is ToolState.MISSING:
            return f"missing ({probe.error})" if probe.error else "missing"
        return (
            f"out of date ({probe.version or 'unknown version'} < "
            f"{status.spec.min_version})"
        )

    def _cancel_message(self, error: Optional[str]) -> str:
        if error and error.startswith("cancelled:"):
            return error
        return f"cancelled: {self.cancel_token.reason or 'run cancelled'}"

    @staticmethod
    def _abort(status: ToolStatus, message: str):
        """Mark a tool that was in flight when the run was cancelled."""
        if not status.state.is_terminal:
            status.transition(ToolState.INSTALL_FAILED, error=message)
