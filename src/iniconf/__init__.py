"""IniConf - section/option configuration with reference unfolding.

Values may reference other options with ``%(name)s`` and environment variables
with ``${NAME}``; references are resolved on read, and resolved values can be
bound to typed dataclass fields.
"""
# ruff: noqa: F401

from .binder import Binding, option, populate
from .config import DEFAULT_SECTION, Config
from .conversion import BOOL_STRINGS, uint
from .exceptions import (
    CircularInterpolationError,
    ConfigLoadError,
    IniConfError,
    NotFoundError,
    OptionNotFoundError,
    SectionNotFoundError,
    TypeConversionError,
    UnresolvedReferenceError,
    UnsupportedTypeError,
)
from .interpolation import MAX_DEPTH, InterpolationEngine, unfold
from .parser import IniConfParser

__version__ = "0.1.0"
