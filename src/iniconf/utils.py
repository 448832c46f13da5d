"""Utility functions for IniConf."""

from copy import deepcopy
from typing import Any, Dict

import yaml


def load_yaml(stream: Any) -> Any:
    """Load YAML content from a stream.

    Args:
        stream: Stream to read YAML from  # (file-like object or string)
    Returns:
        Parsed YAML content  # (plain Python objects, no custom tags)
    """
    return yaml.safe_load(stream)


def dump_yaml(data: Dict[str, Any]) -> str:
    """Dump a mapping as block-style YAML, keeping key order."""
    return yaml.safe_dump(data, default_flow_style=False, indent=2, sort_keys=False)


def deep_merge(base: Dict[str, Any], update: Dict[str, Any]) -> Dict[str, Any]:
    """Deep merge two dictionaries, with update taking precedence.

    Args:
        base: Base dictionary  # (original configuration)
        update: Update dictionary (takes precedence)  # (overrides and additions)

    Returns:
        Merged dictionary  # (combined configuration with deep merging)
    """
    result = deepcopy(base)

    # Merge each key from update into result
    for key, value in update.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            # Recursively merge nested dictionaries
            result[key] = deep_merge(result[key], value)
        else:
            # Replace or add the value
            result[key] = deepcopy(value)
    return result
