"""
List command implementation.
"""

import logging

from toolsetkit.cli.utils import load_toolset, print_error
from toolsetkit.core.exceptions import ConfigError
from toolsetkit.tools.reporter import EXIT_CONFIG_ERROR, EXIT_OK

logger = logging.getLogger(__name__)


def run(args) -> int:
    """Print the declared tools in installation order."""
    try:
        config = load_toolset(args)
    except ConfigError as e:
        print_error("Invalid tool configuration", str(e))
        return EXIT_CONFIG_ERROR

    specs = config.registry.list()
    width = max((len(spec.name) for spec in specs), default=0)
    print(f"Tools from {config.source or 'built-in tool set'}:")
    for spec in specs:
        floor = f">= {spec.min_version}" if spec.min_version else "any version"
        kind = "required" if spec.required else "optional"
        line = f"  {spec.name.ljust(width)}  [{spec.backend}] {floor}, {kind}"
        if spec.description:
            line += f" - {spec.description}"
        print(line)
    return EXIT_OK
