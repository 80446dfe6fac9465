"""
Bounded, cancellable external process execution.

Every probe and install step goes through :func:`run_command`. A call never
waits without limit: it ends when the process exits, when its own timeout
expires, or when the run-level :class:`CancellationToken` fires. In the last
two cases the process (and on POSIX its whole process group, so package
managers that fork helpers are stopped too) is terminated before returning.
"""

import logging
import os
import signal
import subprocess
import threading
import time
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

from toolsetkit.core.exceptions import RunCancelledError

logger = logging.getLogger(__name__)

# Exit code reported when the executable itself cannot be started
EXIT_NOT_FOUND = 127

# Seconds between cancellation checks while waiting on a process
POLL_INTERVAL = 0.1

# Grace period between SIGTERM and SIGKILL
TERMINATE_GRACE = 3.0


class CancellationToken:
    """
    Run-level cancellation signal with an optional deadline.

    Thread-safe: may be cancelled from a signal handler, a timer or another
    worker thread while processes are running.

    Example:
        >>> token = CancellationToken(timeout=600)
        >>> token.cancelled
        False
        >>> token.cancel("interrupted by user")
        >>> token.reason
        'interrupted by user'
    """

    def __init__(self, timeout: Optional[float] = None):
        """
        Initialize token.

        Args:
            timeout: Seconds from now after which the token counts as
                cancelled (None for no deadline)
        """
        self._event = threading.Event()
        self._reason: Optional[str] = None
        self._lock = threading.Lock()
        self.deadline = time.monotonic() + timeout if timeout else None

    def cancel(self, reason: str = "cancelled by request"):
        """Cancel the run. The first reason given is kept."""
        with self._lock:
            if self._reason is None:
                self._reason = reason
            self._event.set()

    @property
    def cancelled(self) -> bool:
        if self._event.is_set():
            return True
        if self.deadline is not None and time.monotonic() >= self.deadline:
            self.cancel("run timeout expired")
            return True
        return False

    @property
    def reason(self) -> Optional[str]:
        return self._reason

    def remaining(self) -> Optional[float]:
        """Seconds left before the deadline, or None without a deadline."""
        if self.deadline is None:
            return None
        return max(0.0, self.deadline - time.monotonic())

    def raise_if_cancelled(self):
        """
        Raise if the run was cancelled.

        Raises:
            RunCancelledError: If cancelled or past the deadline
        """
        if self.cancelled:
            raise RunCancelledError(self._reason or "cancelled")


@dataclass
class CommandResult:
    """Outcome of one external process invocation."""

    argv: List[str]
    exit_code: int
    output: str
    duration: float
    timed_out: bool = False
    cancelled: bool = False
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return (
            self.exit_code == 0
            and not self.timed_out
            and not self.cancelled
            and self.error is None
        )


def _terminate(proc: subprocess.Popen):
    """Stop a running process, escalating from SIGTERM to SIGKILL."""
    if proc.poll() is not None:
        return

    try:
        if os.name == "posix":
            os.killpg(proc.pid, signal.SIGTERM)
        else:
            proc.terminate()
    except (ProcessLookupError, PermissionError) as e:
        logger.debug(f"Terminate failed for pid {proc.pid}: {e}")

    try:
        proc.wait(timeout=TERMINATE_GRACE)
        return
    except subprocess.TimeoutExpired:
        pass

    logger.debug(f"Process {proc.pid} ignored SIGTERM, killing")
    try:
        if os.name == "posix":
            os.killpg(proc.pid, signal.SIGKILL)
        else:
            proc.kill()
    except (ProcessLookupError, PermissionError) as e:
        logger.debug(f"Kill failed for pid {proc.pid}: {e}")
    proc.wait()


def run_command(
    argv: Sequence[str],
    timeout: float,
    cancel_token: Optional[CancellationToken] = None,
    env: Optional[Dict[str, str]] = None,
    cwd: Optional[str] = None,
) -> CommandResult:
    """
    Run an external command and capture its combined output.

    Never raises for process-level failures: a missing executable, a
    timeout and a cancellation all come back as a CommandResult.

    Args:
        argv: Explicit argument vector (no shell)
        timeout: Seconds before the process is terminated
        cancel_token: Optional run-level cancellation token
        env: Optional environment for the child (inherits when None)
        cwd: Optional working directory

    Returns:
        CommandResult with exit code and combined stdout/stderr
    """
    argv = [str(a) for a in argv]
    start = time.monotonic()
    logger.debug(f"Running: {' '.join(argv)} (timeout {timeout}s)")

    if cancel_token is not None and cancel_token.cancelled:
        return CommandResult(
            argv=argv,
            exit_code=-1,
            output="",
            duration=0.0,
            cancelled=True,
            error=f"cancelled: {cancel_token.reason}",
        )

    try:
        proc = subprocess.Popen(
            argv,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
            errors="replace",
            env=env,
            cwd=cwd,
            start_new_session=(os.name == "posix"),
        )
    except FileNotFoundError:
        return CommandResult(
            argv=argv,
            exit_code=EXIT_NOT_FOUND,
            output="",
            duration=time.monotonic() - start,
            error=f"command not found: {argv[0]}",
        )
    except OSError as e:
        return CommandResult(
            argv=argv,
            exit_code=EXIT_NOT_FOUND,
            output="",
            duration=time.monotonic() - start,
            error=f"failed to start {argv[0]}: {e}",
        )

    # Drain output on a helper thread so a chatty installer can't block on
    # a full pipe while we poll for cancellation
    chunks: List[str] = []
    reader = threading.Thread(
        target=lambda: chunks.append(proc.stdout.read()), daemon=True
    )
    reader.start()

    timed_out = False
    cancelled = False
    error = None
    deadline = start + timeout

    try:
        while True:
            try:
                proc.wait(timeout=POLL_INTERVAL)
                break
            except subprocess.TimeoutExpired:
                pass

            if cancel_token is not None and cancel_token.cancelled:
                cancelled = True
                error = f"cancelled: {cancel_token.reason}"
                logger.warning(f"Cancelling {argv[0]} (pid {proc.pid})")
                _terminate(proc)
                break

            if time.monotonic() >= deadline:
                timed_out = True
                error = f"timed out after {timeout}s"
                logger.warning(f"{argv[0]} timed out after {timeout}s")
                _terminate(proc)
                break
    except KeyboardInterrupt:
        cancelled = True
        error = "cancelled: interrupted by user"
        if cancel_token is not None:
            cancel_token.cancel("interrupted by user")
        _terminate(proc)

    reader.join(timeout=TERMINATE_GRACE)
    proc.stdout.close()

    duration = time.monotonic() - start
    result = CommandResult(
        argv=argv,
        exit_code=proc.returncode if proc.returncode is not None else -1,
        output="".join(chunks),
        duration=duration,
        timed_out=timed_out,
        cancelled=cancelled,
        error=error,
    )
    logger.debug(
        f"{argv[0]} exited with {result.exit_code} in {duration:.2f}s"
    )
    return result
