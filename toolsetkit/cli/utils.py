"""
Shared utilities for CLI commands.

Provides common functionality used across multiple CLI commands to
eliminate duplication and ensure consistent behavior.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Any, Dict, Optional

from toolsetkit.config.parser import ToolsetConfig, load_config

logger = logging.getLogger(__name__)


# ============================================================================
# Configuration Management
# ============================================================================


def load_toolset(args) -> ToolsetConfig:
    """
    Load configuration for a command and apply command-line overrides.

    Args:
        args: Parsed arguments (project_root, config and optional
            probe_timeout/install_timeout/max_output)

    Returns:
        Configuration with overrides applied

    Raises:
        ConfigError: If the configuration is missing or invalid
    """
    project_root = resolve_project_root(getattr(args, "project_root", None))
    config = load_config(project_root, getattr(args, "config", None))

    for key in ("probe_timeout", "install_timeout", "max_output"):
        value = getattr(args, key, None)
        if value is not None:
            logger.debug(f"Overriding {key} from command line: {value}")
            setattr(config.settings, key, value)

    source = config.source or "built-in tool set"
    logger.debug(f"Using {len(config.registry)} tool(s) from {source}")
    return config


def positive_float(value: str) -> float:
    """argparse type for strictly positive numbers."""
    try:
        number = float(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not a number: {value}")
    if number <= 0:
        raise argparse.ArgumentTypeError(f"must be positive: {value}")
    return number


def positive_int(value: str) -> int:
    """argparse type for strictly positive integers."""
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not an integer: {value}")
    if number <= 0:
        raise argparse.ArgumentTypeError(f"must be positive: {value}")
    return number


# ============================================================================
# User Interface / Output Formatting
# ============================================================================


def format_success_message(
    title: str,
    details: Dict[str, Any],
    next_steps: Optional[list] = None,
    width: int = 70,
) -> str:
    """
    Format a standardized success message.

    Args:
        title: Success message title
        details: Key-value pairs to display
        next_steps: Optional list of next step instructions
        width: Width of message box

    Returns:
        Formatted message string
    """
    lines = []
    lines.append("=" * width)
    lines.append(title)
    lines.append("=" * width)
    lines.append("")

    for key, value in details.items():
        lines.append(f"{key}: {value}")

    if next_steps:
        lines.append("")
        lines.append("Next steps:")
        for step in next_steps:
            lines.append(f"  {step}")

    lines.append("")
    return "\n".join(lines)


def print_error(message: str, details: Optional[str] = None):
    """
    Print error message to stderr in consistent format.

    Args:
        message: Main error message
        details: Optional additional details
    """
    print(f"ERROR: {message}", file=sys.stderr)
    if details:
        print(f"  {details}", file=sys.stderr)


_ASCII_FALLBACKS = {
    "✅": "[OK]",
    "❌": "[FAIL]",
    "⚠️": "[WARN]",
    "⏸️": "[SKIP]",
    "📊": "",
    "🔧": "[INSTALL]",
    "🔍": "[CHECK]",
}


def safe_print(message: str, file=None):
    """
    Print message with safe encoding handling for limited consoles.

    Falls back to ASCII markers if Unicode symbols can't be encoded.

    Args:
        message: Message to print
        file: Output file (default: stdout)
    """
    try:
        print(message, file=file)
    except UnicodeEncodeError:
        for symbol, replacement in _ASCII_FALLBACKS.items():
            message = message.replace(symbol, replacement)
        print(message.encode("ascii", "replace").decode("ascii"), file=file)


# ============================================================================
# Path Utilities
# ============================================================================


def resolve_project_root(path: Optional[Path] = None) -> Path:
    """
    Resolve project root directory.

    Args:
        path: Optional path (defaults to current directory)

    Returns:
        Resolved absolute path
    """
    if path is None:
        path = Path.cwd()
    return Path(path).resolve()
