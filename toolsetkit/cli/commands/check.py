"""
Check command implementation.

Probes every declared tool and reports which are missing or outdated
without installing anything.
"""

import json
import logging

from toolsetkit.cli.utils import load_toolset, print_error, safe_print
from toolsetkit.core.exceptions import ConfigError
from toolsetkit.core.process import CancellationToken
from toolsetkit.tools.models import ToolState
from toolsetkit.tools.orchestrator import Orchestrator
from toolsetkit.tools.probe import Probe
from toolsetkit.tools.reporter import (
    EXIT_CANCELLED,
    EXIT_CONFIG_ERROR,
    EXIT_OK,
    EXIT_TOOL_FAILURE,
    Reporter,
)

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the check command.

    Args:
        args: Parsed command-line arguments

    Returns:
        0 if every required tool is satisfied, 1 otherwise, 2 on a
        configuration error
    """
    try:
        config = load_toolset(args)
        specs = config.registry.select(args.only)
    except ConfigError as e:
        logger.error(f"Configuration error: {e}")
        print_error("Invalid tool configuration", str(e))
        return EXIT_CONFIG_ERROR

    token = CancellationToken()
    orchestrator = Orchestrator(
        probe=Probe(timeout=config.settings.probe_timeout, cancel_token=token),
        cancel_token=token,
    )

    if not args.quiet and not args.json:
        safe_print(f"🔍 Checking {len(specs)} tool(s)...\n")

    statuses = orchestrator.check(specs)

    reporter = Reporter(max_output=config.settings.max_output)
    if args.json:
        print(json.dumps(reporter.to_dict(statuses), indent=2))
    else:
        safe_print(reporter.render(statuses))

    if orchestrator.cancelled:
        return EXIT_CANCELLED

    unsatisfied = [
        s.name
        for s in statuses
        if s.spec.required and s.state is not ToolState.SATISFIED
    ]
    if unsatisfied:
        if not args.json:
            safe_print(f"\n💡 Run 'tskit install' to fix: {', '.join(unsatisfied)}")
        return EXIT_TOOL_FAILURE
    return EXIT_OK
