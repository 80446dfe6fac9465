"""
Version extraction and comparison.

Tools print their versions in many shapes ("typos-cli 1.16.23",
"cargo-nextest 0.9.67 (abc123 2024-01-01)", "pre-commit 3.6.0"). The first
recognizable version token is taken from the output and compared with
``packaging``; strings ``packaging`` cannot parse fall back to a plain
lexicographic comparison, which is logged as low confidence.
"""

import logging
import re
from typing import Optional

from packaging.version import InvalidVersion, Version

logger = logging.getLogger(__name__)

# X.Y.Z with optional extra numeric parts and a pre-release/build suffix
_FULL_VERSION_RE = re.compile(
    r"(?<![\w.])v?(\d+\.\d+\.\d+(?:\.\d+)*(?:[-+][0-9A-Za-z][0-9A-Za-z.\-]*)?)"
)
# major.minor only
_SHORT_VERSION_RE = re.compile(r"(?<![\w.])v?(\d+\.\d+)(?![\w.])")


def extract_version(output: str, pattern: Optional[str] = None) -> Optional[str]:
    """
    Extract the first recognizable version token from command output.

    Args:
        output: Combined stdout/stderr of a version command
        pattern: Optional tool-specific regex; group 1 (or the whole match)
            is used when it matches

    Returns:
        Version string (e.g. "1.16.23") or None if nothing recognizable

    Example:
        >>> extract_version("typos-cli 1.16.23")
        '1.16.23'
        >>> extract_version("git-cliff v2.1")
        '2.1'
    """
    if not output:
        return None

    if pattern:
        match = re.search(pattern, output)
        if match:
            return match.group(1) if match.groups() else match.group(0)
        logger.debug(f"Version pattern {pattern!r} did not match, using default")

    match = _FULL_VERSION_RE.search(output)
    if match:
        return match.group(1)

    match = _SHORT_VERSION_RE.search(output)
    if match:
        return match.group(1)

    logger.debug(f"Could not parse version from output: {output[:200]!r}")
    return None


def is_valid_version(version_str: str) -> bool:
    """Check whether a version string parses as a semantic version."""
    try:
        Version(version_str)
        return True
    except InvalidVersion:
        return False


def compare_versions(installed: str, minimum: str) -> int:
    """
    Compare two version strings.

    Args:
        installed: Installed version
        minimum: Version floor

    Returns:
        Negative if installed < minimum, zero if equal, positive otherwise
    """
    if is_valid_version(installed) and is_valid_version(minimum):
        left, right = Version(installed), Version(minimum)
    else:
        logger.warning(
            f"Low-confidence version comparison: {installed!r} vs {minimum!r} "
            "(not semantic versions, comparing as text)"
        )
        left, right = installed, minimum

    if left < right:
        return -1
    if left > right:
        return 1
    return 0


def satisfies_minimum(installed: Optional[str], minimum: Optional[str]) -> bool:
    """
    Decide whether an installed version meets a version floor.

    A missing floor is always satisfied. An unknown installed version only
    satisfies when there is no floor.

    Example:
        >>> satisfies_minimum("1.2.0", "1.2.0")
        True
        >>> satisfies_minimum("1.1.9", "1.2.0")
        False
        >>> satisfies_minimum(None, None)
        True
    """
    if not minimum:
        return True
    if installed is None:
        return False
    return compare_versions(installed, minimum) >= 0
