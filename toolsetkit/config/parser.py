"""YAML configuration parser for ToolsetKit.

This module provides parsing and validation for toolset.yaml configuration
files. Example file::

    version: 1
    settings:
      probe_timeout: 30
      install_timeout: 900
    tools:
      - name: typos
        probe: typos --version
        install: cargo install typos-cli
        min_version: 1.16.0
"""

import logging
import shlex
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import yaml

from toolsetkit.config.defaults import default_tool_specs
from toolsetkit.config.registry import ToolRegistry
from toolsetkit.core.exceptions import ConfigError
from toolsetkit.tools.installer import DEFAULT_INSTALL_TIMEOUT
from toolsetkit.tools.models import ToolSpec
from toolsetkit.tools.probe import DEFAULT_PROBE_TIMEOUT
from toolsetkit.tools.reporter import DEFAULT_MAX_OUTPUT

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_NAME = "toolset.yaml"
SUPPORTED_VERSIONS = (1,)

_TOOL_KEYS = {
    "name",
    "probe",
    "install",
    "min_version",
    "required",
    "backend",
    "version_pattern",
    "description",
}


@dataclass
class Settings:
    """Run settings."""

    probe_timeout: float = DEFAULT_PROBE_TIMEOUT
    install_timeout: float = DEFAULT_INSTALL_TIMEOUT
    max_output: int = DEFAULT_MAX_OUTPUT


@dataclass
class ToolsetConfig:
    """Complete ToolsetKit configuration."""

    registry: ToolRegistry
    settings: Settings = field(default_factory=Settings)
    version: int = 1
    source: Optional[Path] = None  # None for the built-in tool set


def parse_config(config_path: Path) -> ToolsetConfig:
    """
    Parse a toolset.yaml configuration file.

    Args:
        config_path: Path to toolset.yaml

    Returns:
        Parsed and validated configuration

    Raises:
        ConfigError: If configuration is invalid
    """
    if not config_path.exists():
        raise ConfigError(f"Configuration file not found: {config_path}")

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML syntax: {e}")
    except UnicodeDecodeError as e:
        raise ConfigError(f"Configuration file is not valid UTF-8: {config_path}: {e}")
    except OSError as e:
        raise ConfigError(f"Cannot read configuration file {config_path}: {e}")

    if data is None:
        raise ConfigError("Configuration file is empty")

    config = parse_config_data(data)
    config.source = config_path
    logger.debug(f"Loaded {len(config.registry)} tool(s) from {config_path}")
    return config


def parse_config_data(data: Any) -> ToolsetConfig:
    """
    Validate already-loaded configuration data.

    Raises:
        ConfigError: If configuration is invalid
    """
    if not isinstance(data, dict):
        raise ConfigError("Configuration must be a mapping")

    version = data.get("version", 1)
    if version not in SUPPORTED_VERSIONS:
        raise ConfigError(
            f"Unsupported configuration version: {version} "
            f"(supported: {', '.join(str(v) for v in SUPPORTED_VERSIONS)})"
        )

    settings = _parse_settings(data.get("settings") or {})

    tools = data.get("tools")
    if tools is None:
        raise ConfigError("Missing required field: tools")
    if not isinstance(tools, list):
        raise ConfigError("Field 'tools' must be a list")
    if not tools:
        raise ConfigError("Field 'tools' must declare at least one tool")

    specs = [_parse_tool(entry, index) for index, entry in enumerate(tools)]
    return ToolsetConfig(
        registry=ToolRegistry(specs), settings=settings, version=version
    )


def load_config(
    project_root: Path, config_file: Optional[Path] = None
) -> ToolsetConfig:
    """
    Load configuration, falling back to the built-in tool set.

    An explicitly given file must exist. Otherwise ``toolset.yaml`` in the
    project root is used when present, and the built-in tools when not.

    Args:
        project_root: Project root directory
        config_file: Optional explicit configuration path

    Returns:
        Loaded configuration

    Raises:
        ConfigError: If the configuration is missing or invalid
    """
    if config_file is not None:
        return parse_config(Path(config_file))

    default_path = Path(project_root) / DEFAULT_CONFIG_NAME
    if default_path.exists():
        return parse_config(default_path)

    logger.debug("No configuration file found, using built-in tool set")
    return ToolsetConfig(registry=ToolRegistry(default_tool_specs()))


def _parse_settings(data: Any) -> Settings:
    if not isinstance(data, dict):
        raise ConfigError("Field 'settings' must be a mapping")

    settings = Settings()
    for key in ("probe_timeout", "install_timeout"):
        if key in data:
            setattr(settings, key, _positive_number(data[key], f"settings.{key}"))
    if "max_output" in data:
        settings.max_output = _positive_int(data["max_output"], "settings.max_output")

    unknown = set(data) - {"probe_timeout", "install_timeout", "max_output"}
    if unknown:
        raise ConfigError(f"Unknown settings: {', '.join(sorted(unknown))}")
    return settings


def _positive_number(value: Any, field_name: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
        raise ConfigError(f"{field_name} must be a positive number, got {value!r}")
    return float(value)


def _positive_int(value: Any, field_name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise ConfigError(f"{field_name} must be a positive integer, got {value!r}")
    return value


def _optional_string(entry: Dict[str, Any], key: str, where: str) -> Optional[str]:
    value = entry.get(key)
    if value is not None and not isinstance(value, str):
        raise ConfigError(f"{where}.{key} must be a string, got {value!r}")
    return value


def _parse_tool(entry: Any, index: int) -> ToolSpec:
    where = f"tools[{index}]"
    if not isinstance(entry, dict):
        raise ConfigError(f"{where}: each tool must be a mapping")

    name = entry.get("name")
    if not isinstance(name, str) or not name.strip():
        raise ConfigError(f"{where}: missing required field 'name'")
    where = f"tools.{name}"

    unknown = set(entry) - _TOOL_KEYS
    if unknown:
        raise ConfigError(f"{where}: unknown field(s): {', '.join(sorted(unknown))}")

    required = entry.get("required", True)
    if not isinstance(required, bool):
        raise ConfigError(f"{where}.required must be true or false")

    # Unquoted 1.10 loads as the float 1.1
    min_version = entry.get("min_version")
    if isinstance(min_version, int) and not isinstance(min_version, bool):
        min_version = str(min_version)
    elif min_version is not None and not isinstance(min_version, str):
        raise ConfigError(
            f"{where}.min_version must be a quoted string, got {min_version!r}"
        )

    return ToolSpec(
        name=name.strip(),
        probe_command=_parse_command(entry.get("probe"), f"{where}.probe"),
        install_command=_parse_command(entry.get("install"), f"{where}.install"),
        min_version=min_version,
        required=required,
        backend=_optional_string(entry, "backend", where),
        version_pattern=_optional_string(entry, "version_pattern", where),
        description=_optional_string(entry, "description", where),
    )


def _parse_command(value: Any, field_name: str) -> Tuple[str, ...]:
    """Accept a command as a shell-like string or an argument list."""
    if value is None:
        raise ConfigError(f"Missing required field: {field_name}")

    if isinstance(value, str):
        try:
            argv: List[str] = shlex.split(value)
        except ValueError as e:
            raise ConfigError(f"{field_name}: cannot parse command: {e}")
    elif isinstance(value, list):
        argv = [str(part) for part in value]
    else:
        raise ConfigError(f"{field_name} must be a string or a list")

    if not argv:
        raise ConfigError(f"{field_name} must not be empty")
    return tuple(argv)


def config_to_dict(config: ToolsetConfig) -> Dict[str, Any]:
    """Serialize a configuration back to its YAML shape."""
    tools = []
    for spec in config.registry:
        entry: Dict[str, Any] = {
            "name": spec.name,
            "probe": shlex.join(spec.probe_command),
            "install": shlex.join(spec.install_command),
        }
        if spec.min_version:
            entry["min_version"] = spec.min_version
        entry["required"] = spec.required
        entry["backend"] = spec.backend
        if spec.version_pattern:
            entry["version_pattern"] = spec.version_pattern
        if spec.description:
            entry["description"] = spec.description
        tools.append(entry)

    return {
        "version": config.version,
        "settings": {
            "probe_timeout": config.settings.probe_timeout,
            "install_timeout": config.settings.install_timeout,
            "max_output": config.settings.max_output,
        },
        "tools": tools,
    }
