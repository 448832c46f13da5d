"""IniConf configuration store module."""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional, Union

from .binder import populate
from .conversion import to_bool, to_float, to_int
from .exceptions import OptionNotFoundError, SectionNotFoundError
from .interpolation import MAX_DEPTH, InterpolationEngine
from .loader import load_sources

DEFAULT_SECTION = "DEFAULT"


class Config:
    """Section/option store resolving ``%(name)s`` and ``${NAME}`` references on read."""

    def __init__(
        self,
        data: Optional[Mapping[str, Mapping[str, str]]] = None,
        default_section: str = DEFAULT_SECTION,
        environ: Optional[Mapping[str, str]] = None,
        max_depth: int = MAX_DEPTH,
    ):
        """Initialize configuration store.

        Args:
            data: Initial content  # (section name -> option name -> raw string value)
            default_section: Fallback section consulted for missing options
            environ: Environment used for ``${NAME}`` references  # (os.environ when not given)
            max_depth: Maximum substitutions per resolution pass

        Raises:
            TypeError: If a value in data is not a string
            ValueError: If max_depth is less than 1
        """
        self.default_section = default_section
        self._data: Dict[str, Dict[str, str]] = {default_section: {}}

        for section, options in (data or {}).items():
            self.add_section(section)
            for option, value in options.items():
                self.set(section, option, value)

        self._engine = InterpolationEngine(self._data, default_section, environ, max_depth)

    @classmethod
    def from_files(cls, *sources: str, **kwargs: Any) -> "Config":
        """Build a store from configuration files and ``section.option=value`` overwrites.

        Args:
            *sources: File paths or overwrites, applied in order
            **kwargs: Forwarded to the constructor

        Returns:
            Loaded configuration store
        """
        default_section = kwargs.get("default_section", DEFAULT_SECTION)
        return cls(load_sources(sources, default_section), **kwargs)

    # ---------------------------------------------------------------- sections

    def sections(self) -> List[str]:
        """Return all section names, the default section included."""
        return list(self._data)

    def has_section(self, section: str) -> bool:
        return section in self._data

    def add_section(self, section: str) -> bool:
        """Add an empty section.

        Returns:
            False if the section already existed
        """
        if section in self._data:
            return False
        self._data[section] = {}
        return True

    def remove_section(self, section: str) -> bool:
        """Remove a section and all its options.

        Returns:
            False if the section does not exist or is the default section
        """
        if section == self.default_section or section not in self._data:
            return False
        del self._data[section]
        return True

    # ----------------------------------------------------------------- options

    def options(self, section: str) -> List[str]:
        """Return the options visible from section, its own first, then the inherited defaults.

        Raises:
            SectionNotFoundError: If section does not exist
        """
        if section not in self._data:
            raise SectionNotFoundError(section)

        names = list(self._data[section])
        if section != self.default_section:
            names.extend(name for name in self._data[self.default_section] if name not in self._data[section])
        return names

    def has_option(self, section: str, option: str) -> bool:
        """Check whether option can be read from section, default section included."""
        return option in self._data.get(section, {}) or option in self._data[self.default_section]

    def set(self, section: str, option: str, value: str) -> None:
        """Store a raw value, creating the section when needed.

        Raises:
            TypeError: If value is not a string
        """
        if not isinstance(value, str):
            raise TypeError(f"Value of [{section}] {option} must be a string, got {type(value).__name__}")
        self.add_section(section)
        self._data[section][option] = value

    def remove_option(self, section: str, option: str) -> bool:
        """Remove option from section.

        Returns:
            False if the option is not stored in that section
        """
        if option not in self._data.get(section, {}):
            return False
        del self._data[section][option]
        return True

    # -------------------------------------------------------------- accessors

    def get_raw_string(self, section: str, option: str) -> str:
        """Get the stored value of option, without resolving references.

        Looks in section first and falls back to the default section.

        Raises:
            OptionNotFoundError: If neither section nor the default section has option
        """
        options = self._data.get(section)
        if options is not None and option in options:
            return options[option]
        try:
            return self.get_raw_string_default(option)
        except OptionNotFoundError:
            raise OptionNotFoundError(option, section) from None

    def get_raw_string_default(self, option: str) -> str:
        """Get the stored value of option from the default section only.

        Raises:
            OptionNotFoundError: If the default section has no such option
        """
        try:
            return self._data[self.default_section][option]
        except KeyError:
            raise OptionNotFoundError(option, self.default_section) from None

    def get_string(self, section: str, option: str) -> str:
        """Get the value of option with every reference resolved.

        ``%(name)s`` references are unfolded first, from section or the default
        section, then ``${NAME}`` references from the environment.

        Raises:
            OptionNotFoundError: If the option does not exist
            UnresolvedReferenceError: If a reference has no value
            CircularInterpolationError: If unfolding did not terminate within max_depth
        """
        value = self.get_raw_string(section, option)
        return self._engine.resolve(value, section)

    def get_bool(self, section: str, option: str) -> bool:
        """Get the resolved value of option as a bool (see ``BOOL_STRINGS``)."""
        return to_bool(self.get_string(section, option))

    def get_int(self, section: str, option: str) -> int:
        """Get the resolved value of option as a base-10 int."""
        return to_int(self.get_string(section, option))

    def get_float(self, section: str, option: str) -> float:
        """Get the resolved value of option as a float."""
        return to_float(self.get_string(section, option))

    # ---------------------------------------------------------------- binding

    def populate(self, destination: Any) -> None:
        """Fill the tagged fields of a dataclass instance (see ``iniconf.binder.populate``)."""
        populate(destination, self)

    # ------------------------------------------------------------------ export

    def to_dict(self, resolved: bool = False) -> Dict[str, Dict[str, str]]:
        """Convert to plain dictionary.

        Args:
            resolved: Resolve every value instead of copying the raw strings

        Returns:
            Plain dictionary representation  # (section name -> option name -> value)
        """
        if not resolved:
            return {section: dict(options) for section, options in self._data.items()}
        return {
            section: {option: self.get_string(section, option) for option in options}
            for section, options in self._data.items()
        }

    def __contains__(self, key: Union[str, tuple]) -> bool:
        """Dict-style contains check on a section name or a (section, option) pair."""
        if isinstance(key, tuple):
            return self.has_option(*key)
        return self.has_section(key)

    def __repr__(self) -> str:
        """String representation."""
        return f"Config({self._data})"
