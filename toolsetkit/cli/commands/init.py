"""
Init command implementation.

Writes a starter toolset.yaml containing the built-in tool set.
"""

import logging
from pathlib import Path

import yaml

from toolsetkit.cli.utils import (
    format_success_message,
    print_error,
    resolve_project_root,
)
from toolsetkit.config.defaults import default_tool_specs
from toolsetkit.config.parser import (
    DEFAULT_CONFIG_NAME,
    ToolsetConfig,
    config_to_dict,
)
from toolsetkit.config.registry import ToolRegistry
from toolsetkit.tools.reporter import EXIT_OK, EXIT_TOOL_FAILURE

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the init command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success, 1 for error)
    """
    project_root = resolve_project_root(args.project_root)
    config_file = (
        Path(args.config).resolve() if args.config else project_root / DEFAULT_CONFIG_NAME
    )

    if config_file.exists() and not args.force:
        print_error(
            "Configuration already exists",
            f"{config_file}\n  Use --force to overwrite",
        )
        return EXIT_TOOL_FAILURE

    config = ToolsetConfig(registry=ToolRegistry(default_tool_specs()))
    data = config_to_dict(config)

    try:
        config_file.parent.mkdir(parents=True, exist_ok=True)
        with open(config_file, "w", encoding="utf-8") as f:
            f.write("# ToolsetKit tool declarations\n")
            yaml.safe_dump(data, f, sort_keys=False, default_flow_style=False)
    except OSError as e:
        logger.error(f"Failed to write configuration file: {e}")
        print_error("Failed to write configuration file", str(e))
        return EXIT_TOOL_FAILURE

    logger.debug(f"Wrote {config_file}")
    print(
        format_success_message(
            "ToolsetKit initialized successfully!",
            {"Configuration file": config_file, "Tools": len(config.registry)},
            next_steps=[
                f"1. Review and edit {config_file.name}",
                "2. Run: tskit install",
            ],
        )
    )
    return EXIT_OK
