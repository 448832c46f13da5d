"""Population of dataclass fields from a configuration store.

Fields are bound through their metadata::

    @dataclass
    class Server:
        host: str = option("web-host", default="localhost")
        ports: list[int] = option("web-ports", default_factory=list)

    config.populate(server)
"""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass, field, fields, is_dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, Optional, get_args, get_origin, get_type_hints

from .conversion import CONVERTER_TYPE, SCALAR_CONVERTERS, uint
from .exceptions import NotFoundError, UnsupportedTypeError

if TYPE_CHECKING:
    from .config import Config

logger = logging.getLogger(__name__)

TAG_KEY = "config"
SKIP_TAG = "-"

# Scalar field kinds; float is only accepted as a list element
SCALAR_FIELD_TYPES = (str, bool, int, uint)


def option(tag: str, **kwargs: Any) -> Any:
    """Declare a dataclass field bound to ``section-option``.

    Args:
        tag: Binding tag  # (e.g. "web-port", "-" to skip)
        **kwargs: Forwarded to ``dataclasses.field``  # (default, default_factory, ...)
    """
    metadata = dict(kwargs.pop("metadata", None) or {})
    metadata[TAG_KEY] = tag
    return field(metadata=metadata, **kwargs)


@dataclass(frozen=True)
class Binding:
    """Section/option pair a field pulls its value from."""

    section: str
    option: str


def binding_for(f: dataclasses.Field) -> Optional[Binding]:
    """Derive the binding of a field from its ``config`` tag.

    Args:
        f: Dataclass field

    Returns:
        Binding, or None when the field is not bound  # (no tag, "-", or a malformed tag)
    """
    tag = f.metadata.get(TAG_KEY, "")
    if not tag or tag == SKIP_TAG:
        return None

    parts = tag.split("-")
    if len(parts) < 2:
        logger.warning("Ignoring field %r: tag %r is not of the form section-option", f.name, tag)
        return None

    section, name = parts[0].strip(), parts[1].strip()
    if not section or not name:
        return None
    return Binding(section, name)


@dataclass(frozen=True)
class FieldLoader:
    """Reads one field kind from the store."""

    kind: str  # (str, bool, int, uint, or list[...] of those and float)
    convert: CONVERTER_TYPE
    sequence: bool = False

    def load(self, config: "Config", binding: Binding) -> Any:
        """Resolve the bound option and convert it.

        A sequence is split on every comma, so an empty value yields ``[""]``.
        """
        value = config.get_string(binding.section, binding.option)
        if self.sequence:
            return [self.convert(item) for item in value.split(",")]
        return self.convert(value)


def field_loader(annotation: Any, binding: Binding) -> FieldLoader:
    """Pick the loader for a field type.

    Raises:
        UnsupportedTypeError: If the type is not a supported scalar or list of scalars
    """
    if annotation in SCALAR_FIELD_TYPES:
        return FieldLoader(_type_name(annotation), SCALAR_CONVERTERS[annotation])

    if get_origin(annotation) is list:
        args = get_args(annotation)
        if len(args) == 1 and args[0] in SCALAR_CONVERTERS:
            return FieldLoader(f"list[{_type_name(args[0])}]", SCALAR_CONVERTERS[args[0]], sequence=True)

    raise UnsupportedTypeError(
        f"unsupported type:[{binding.section}-{binding.option}]: {_type_name(annotation)}", annotation
    )


class RecordShape(Enum):
    """How a destination handed to ``populate`` reaches its record."""

    DIRECT = "direct"  # mutable dataclass instance
    INDIRECT = "indirect"  # object whose __wrapped__ is a mutable dataclass instance
    UNSUPPORTED = "unsupported"


def record_shape(destination: Any) -> RecordShape:
    if _is_mutable_record(destination):
        return RecordShape.DIRECT
    if _is_mutable_record(getattr(destination, "__wrapped__", None)):
        return RecordShape.INDIRECT
    return RecordShape.UNSUPPORTED


def populate(destination: Any, config: "Config") -> None:
    """Assign resolved option values to the bound fields of destination.

    Fields are visited in declaration order. A field whose option is missing keeps
    its current value; any other error stops the population and propagates.

    Args:
        destination: Mutable dataclass instance, or an object wrapping one in ``__wrapped__``
        config: Store to read from  # (never modified)

    Raises:
        UnsupportedTypeError: If destination or one of its bound field types is not supported
        TypeConversionError: If a value cannot be converted to its field type
        UnresolvedReferenceError: If a value references an undefined variable
        CircularInterpolationError: If a value cannot be unfolded within the depth limit
    """
    shape = record_shape(destination)
    if shape is RecordShape.UNSUPPORTED:
        raise UnsupportedTypeError("unsupported type", destination)
    record = destination if shape is RecordShape.DIRECT else destination.__wrapped__

    try:
        hints = get_type_hints(type(record))
    except NameError as e:
        raise UnsupportedTypeError(f"unsupported type: cannot resolve fields of {type(record).__name__}: {e}") from e

    for f in fields(record):
        annotation = hints.get(f.name, f.type)
        binding = binding_for(f)
        if binding is None:
            continue

        loader = field_loader(annotation, binding)
        try:
            value = loader.load(config, binding)
        except NotFoundError:
            logger.debug("Skipping %s: [%s] %s not found", f.name, binding.section, binding.option)
            continue

        setattr(record, f.name, value)
        logger.debug("Loaded %s (%s) from [%s] %s", f.name, loader.kind, binding.section, binding.option)


def _is_mutable_record(obj: Any) -> bool:
    return is_dataclass(obj) and not isinstance(obj, type) and not type(obj).__dataclass_params__.frozen


def _type_name(tp: Any) -> str:
    if get_origin(tp) is not None:
        return str(tp)
    # NewType and classes both carry __name__
    return getattr(tp, "__name__", None) or str(tp)
