"""Custom exceptions for IniConf."""

from typing import Any, List, Optional


class IniConfError(Exception):
    """Base exception for IniConf errors."""

    pass


class NotFoundError(IniConfError, LookupError):
    """Raised when a section or option is absent from the store."""

    pass


class SectionNotFoundError(NotFoundError):
    """Raised when a section does not exist."""

    def __init__(self, section: str):
        self.section = section
        super().__init__(f"Section not found: {section}")


class OptionNotFoundError(NotFoundError):
    """Raised when an option is absent from both its section and the default section."""

    def __init__(self, option: str, section: Optional[str] = None):
        self.option = option
        self.section = section
        super().__init__(f"Option not found: {option}")


class UnresolvedReferenceError(IniConfError):
    """Raised when a variable or environment reference has no value to substitute."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Option not found: {name}")


class CircularInterpolationError(IniConfError):
    """Raised when unfolding a value exceeds the maximum substitution depth."""

    def __init__(self, max_depth: int, references: Optional[List[str]] = None):
        self.max_depth = max_depth
        self.references = references or []
        message = f"Possible cycle while unfolding variables: max depth of {max_depth} reached"
        if self.references:
            # The tail of the chain is enough to spot the loop
            message += f" ({' → '.join(self.references[-5:])})"
        super().__init__(message)


class TypeConversionError(IniConfError, ValueError):
    """Raised when a resolved value cannot be converted to the requested type."""

    def __init__(self, message: str, value: Any = None):
        self.value = value
        super().__init__(message)


class UnsupportedTypeError(TypeConversionError):
    """Raised when a destination or one of its fields has a type the binder cannot fill."""

    def __init__(self, message: str = "unsupported type", value: Any = None):
        super().__init__(message, value)


class ConfigLoadError(IniConfError):
    """Raised when a configuration source cannot be read or has the wrong shape."""

    def __init__(self, source: str, reason: str):
        self.source = source
        self.reason = reason
        super().__init__(f"Cannot load {source}: {reason}")
