"""
Core functionality for ToolsetKit.

This package contains the foundational modules that other components depend on.
"""

from .exceptions import (
    ToolsetKitError,
    ConfigError,
    DuplicateToolError,
    UnknownToolError,
    RunCancelledError,
    InvalidTransitionError,
    RunLockTimeout,
)

from .locking import (
    LockManager,
    get_global_cache_dir,
)

from .process import (
    CancellationToken,
    CommandResult,
    run_command,
)

from .versioning import (
    extract_version,
    compare_versions,
    satisfies_minimum,
    is_valid_version,
)

__all__ = [
    # Exceptions
    "ToolsetKitError",
    "ConfigError",
    "DuplicateToolError",
    "UnknownToolError",
    "RunCancelledError",
    "InvalidTransitionError",
    "RunLockTimeout",
    # Locking
    "LockManager",
    "get_global_cache_dir",
    # Processes
    "CancellationToken",
    "CommandResult",
    "run_command",
    # Versions
    "extract_version",
    "compare_versions",
    "satisfies_minimum",
    "is_valid_version",
]
