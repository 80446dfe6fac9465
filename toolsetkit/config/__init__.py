"""Configuration module for ToolsetKit.

This module provides YAML configuration parsing for toolset.yaml, the tool
registry, and the built-in tool set.
"""

from toolsetkit.config.defaults import default_tool_specs
from toolsetkit.config.parser import (
    DEFAULT_CONFIG_NAME,
    Settings,
    ToolsetConfig,
    config_to_dict,
    load_config,
    parse_config,
    parse_config_data,
)
from toolsetkit.config.registry import ToolRegistry
from toolsetkit.core.exceptions import ConfigError

__all__ = [
    "DEFAULT_CONFIG_NAME",
    "ConfigError",
    "Settings",
    "ToolRegistry",
    "ToolsetConfig",
    "config_to_dict",
    "default_tool_specs",
    "load_config",
    "parse_config",
    "parse_config_data",
]
