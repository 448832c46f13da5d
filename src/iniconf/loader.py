"""Loading of configuration sources into a section mapping."""

import configparser
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, Tuple

import yaml

from .exceptions import ConfigLoadError
from .utils import deep_merge, load_yaml

logger = logging.getLogger(__name__)

SECTIONS_TYPE = Dict[str, Dict[str, str]]

INI_SUFFIXES = (".ini", ".cfg", ".conf", ".cnf")
YAML_SUFFIXES = (".yaml", ".yml")

# configparser must not treat any real section as its defaults
_NO_DEFAULT_SECTION = "\0"


def load_ini(path: str) -> SECTIONS_TYPE:
    """Load an INI file.

    Option names keep their case and values are read verbatim, so ``%(name)s``
    references are left for the store to resolve. A ``[DEFAULT]`` header is an
    ordinary section here.

    Args:
        path: INI file path

    Returns:
        Section mapping  # (section name -> option name -> raw value)

    Raises:
        ConfigLoadError: If the file is missing or malformed
    """
    parser = configparser.ConfigParser(interpolation=None, default_section=_NO_DEFAULT_SECTION)
    parser.optionxform = str  # type: ignore[assignment,method-assign]

    try:
        if not parser.read(path, encoding="utf-8"):
            raise ConfigLoadError(str(path), "file not found")
    except configparser.Error as e:
        raise ConfigLoadError(str(path), str(e)) from e
    except UnicodeDecodeError as e:
        raise ConfigLoadError(str(path), f"not valid UTF-8: {e.reason}") from e

    return {section: dict(parser.items(section)) for section in parser.sections()}


def load_yaml_file(path: str, default_section: str) -> SECTIONS_TYPE:
    """Load a YAML file.

    Top-level mappings become sections and top-level scalars go to the default
    section. Values are stored as strings, lists joined with commas.

    Args:
        path: YAML file path
        default_section: Section receiving top-level scalars

    Returns:
        Section mapping  # (section name -> option name -> raw value)

    Raises:
        ConfigLoadError: If the file is missing, malformed, or nested too deeply
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = load_yaml(f)
    except OSError as e:
        raise ConfigLoadError(str(path), e.strerror or str(e)) from e
    except yaml.YAMLError as e:
        raise ConfigLoadError(str(path), str(e)) from e
    except UnicodeDecodeError as e:
        raise ConfigLoadError(str(path), f"not valid UTF-8: {e.reason}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigLoadError(str(path), "top level must be a mapping")

    sections: SECTIONS_TYPE = {}
    for key, value in data.items():
        if isinstance(value, dict):
            options = sections.setdefault(str(key), {})
            for name, item in value.items():
                options[str(name)] = _to_raw(item, str(path), f"{key}.{name}")
        else:
            sections.setdefault(default_section, {})[str(key)] = _to_raw(value, str(path), str(key))
    return sections


def parse_overwrite(overwrite: str, default_section: str) -> Tuple[str, str, str]:
    """Split ``section.option=value``.

    A key without a dot targets the default section.

    Returns:
        (section, option, value)

    Raises:
        ConfigLoadError: If there is no ``=`` or no option name
    """
    if "=" not in overwrite:
        raise ConfigLoadError(overwrite, "expected <section>.<option>=<value>")

    key, value = overwrite.split("=", 1)
    key = key.strip()
    if "." in key:
        section, name = key.split(".", 1)
    else:
        section, name = default_section, key

    if not section or not name:
        raise ConfigLoadError(overwrite, "expected <section>.<option>=<value>")
    return section, name, value


def load_sources(sources: Iterable[str], default_section: str) -> SECTIONS_TYPE:
    """Load files and overwrites in order, later ones taking precedence.

    Args:
        sources: File paths (.ini, .cfg, .conf, .cnf, .yaml, .yml) or ``section.option=value`` overwrites
        default_section: Name of the default section

    Returns:
        Merged section mapping
    """
    config: SECTIONS_TYPE = {}

    for source in sources:
        suffix = Path(source).suffix.lower()
        if "=" not in source and suffix in YAML_SUFFIXES:
            loaded = load_yaml_file(source, default_section)
        elif "=" not in source and suffix in INI_SUFFIXES:
            loaded = load_ini(source)
        else:
            section, name, value = parse_overwrite(source, default_section)
            loaded = {section: {name: value}}

        logger.debug("Loaded %s", source)
        config = deep_merge(config, loaded)

    return config


def _to_raw(value: Any, source: str, key: str) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return ""
    if isinstance(value, list):
        if any(isinstance(item, (list, dict)) for item in value):
            raise ConfigLoadError(source, f"{key}: nested lists are not supported")
        return ",".join(_to_raw(item, source, key) for item in value)
    if isinstance(value, dict):
        raise ConfigLoadError(source, f"{key}: nested mappings are not supported")
    return str(value)
