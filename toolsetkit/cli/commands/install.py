"""
Install command implementation.

Probes every declared tool, installs the missing or outdated ones, verifies
the result and reports. Exit codes: 0 when every required tool is
satisfied, 1 when a required tool failed (cancelled or not), 2 on a
configuration error (before anything runs), 130 when the run was cancelled
without any required tool failing.
"""

import json
import logging
import signal
import threading
from contextlib import contextmanager, nullcontext

from toolsetkit.cli.utils import load_toolset, print_error, safe_print
from toolsetkit.core.exceptions import ConfigError, RunLockTimeout
from toolsetkit.core.locking import LockManager
from toolsetkit.core.process import CancellationToken
from toolsetkit.tools.installer import Installer
from toolsetkit.tools.orchestrator import Orchestrator
from toolsetkit.tools.probe import Probe
from toolsetkit.tools.reporter import (
    EXIT_CANCELLED,
    EXIT_CONFIG_ERROR,
    EXIT_TOOL_FAILURE,
    Reporter,
)

logger = logging.getLogger(__name__)


@contextmanager
def cancel_on_sigterm(token: CancellationToken):
    """Turn SIGTERM into a run cancellation while the block runs."""
    if threading.current_thread() is not threading.main_thread():
        yield
        return

    def _handler(signum, frame):
        token.cancel("terminated by signal")

    previous = signal.signal(signal.SIGTERM, _handler)
    try:
        yield
    finally:
        signal.signal(signal.SIGTERM, previous)


def run(args) -> int:
    """
    Run the install command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code
    """
    logger.debug(f"Arguments: {args}")

    # Configuration errors abort before any probe or install runs
    try:
        config = load_toolset(args)
        specs = config.registry.select(args.only)
    except ConfigError as e:
        logger.error(f"Configuration error: {e}")
        print_error("Invalid tool configuration", str(e))
        return EXIT_CONFIG_ERROR

    settings = config.settings
    token = CancellationToken(timeout=args.timeout)
    orchestrator = Orchestrator(
        probe=Probe(timeout=settings.probe_timeout, cancel_token=token),
        installer=Installer(timeout=settings.install_timeout, cancel_token=token),
        cancel_token=token,
        jobs=args.jobs,
    )

    if args.no_lock:
        lock = nullcontext()
    else:
        lock = LockManager().run_lock(timeout=args.lock_timeout)

    if not args.quiet and not args.json:
        safe_print(f"🔧 Bootstrapping {len(specs)} tool(s)...\n")

    try:
        with lock, cancel_on_sigterm(token):
            statuses = orchestrator.run(specs)
    except RunLockTimeout as e:
        print_error("Another install is in progress", str(e))
        return EXIT_TOOL_FAILURE

    reporter = Reporter(max_output=settings.max_output)
    if args.json:
        print(json.dumps(reporter.to_dict(statuses), indent=2))
    else:
        safe_print(reporter.render(statuses))

    exit_code = reporter.exit_code(statuses)
    if orchestrator.cancelled:
        print_error(f"Run cancelled: {token.reason}")
        # A failed required tool outranks the cancellation
        return exit_code or EXIT_CANCELLED

    if exit_code == 0:
        logger.info("All required tools are satisfied")
    else:
        logger.error("One or more required tools failed")
    return exit_code
