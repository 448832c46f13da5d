"""Variable interpolation engine for IniConf configurations."""

import logging
import os
import re
from dataclasses import dataclass
from typing import Callable, List, Mapping, Optional

from .exceptions import CircularInterpolationError, UnresolvedReferenceError

logger = logging.getLogger(__name__)

MAX_DEPTH = 200

LOOKUP_TYPE = Callable[[str], str]


@dataclass(frozen=True)
class ReferencePattern:
    """A reference syntax: a regex capturing the name plus the marker sizes around it."""

    regex: re.Pattern[str]
    head: int  # characters before the captured name
    tail: int  # characters after the captured name

    def find(self, value: str) -> Optional[re.Match[str]]:
        """Return the leftmost reference in value, if any."""
        return self.regex.search(value)

    def splice(self, value: str, match: re.Match[str], replacement: str) -> str:
        """Return value with the matched reference replaced.

        Args:
            value: Value the match was found in
            match: Match returned by ``find``
            replacement: Text substituted for the whole reference  # (markers included)

        Returns:
            New string, value itself is left untouched
        """
        return value[: match.start(1) - self.head] + replacement + value[match.end(1) + self.tail :]


# %(name)s
VARIABLE_PATTERN = ReferencePattern(re.compile(r"%\(([a-zA-Z0-9_.\-]+)\)s"), head=2, tail=2)
# ${NAME}
ENVIRONMENT_PATTERN = ReferencePattern(re.compile(r"\$\{([a-zA-Z0-9_.\-]+)\}"), head=2, tail=1)


def unfold(value: str, pattern: ReferencePattern, lookup: LOOKUP_TYPE, max_depth: int = MAX_DEPTH) -> str:
    """Substitute references in value until none are left.

    Each round replaces the leftmost reference only, so a replacement that itself
    contains references is unfolded by the following rounds.

    Args:
        value: Initial string  # (raw option value)
        pattern: Reference syntax to look for
        lookup: Maps a reference name to its replacement  # ("" means not found)
        max_depth: Maximum number of substitutions

    Returns:
        Value without any reference of the given syntax

    Raises:
        UnresolvedReferenceError: If lookup returns an empty string
        CircularInterpolationError: If max_depth substitutions were not enough
    """
    references: List[str] = []  # (names substituted so far)

    for _ in range(max_depth):
        match = pattern.find(value)
        if match is None:
            return value

        name = match.group(1)
        replacement = lookup(name)
        if replacement == "":
            raise UnresolvedReferenceError(name)

        references.append(name)
        value = pattern.splice(value, match, replacement)
        logger.debug("Unfolded %r into %r", name, value)

    raise CircularInterpolationError(max_depth, references)


class InterpolationEngine:
    """Engine for variable and environment interpolation."""

    def __init__(
        self,
        sections: Mapping[str, Mapping[str, str]],
        default_section: str,
        environ: Optional[Mapping[str, str]] = None,
        max_depth: int = MAX_DEPTH,
    ):
        """Initialize interpolation engine.

        Args:
            sections: Configuration data  # (section name -> option name -> raw value)
            default_section: Name of the fallback section
            environ: Environment variables  # (os.environ when not given)
            max_depth: Maximum substitutions per pass

        Raises:
            ValueError: If max_depth is less than 1
        """
        if max_depth < 1:
            raise ValueError(f"max_depth must be at least 1, got {max_depth}")
        self.sections = sections
        self.default_section = default_section
        self.environ = os.environ if environ is None else environ
        self.max_depth = max_depth

    def resolve(self, value: str, section: str) -> str:
        """Resolve all references in a raw value read from section.

        Variables are unfolded first, environment references are unfolded on the
        result, so ``${...}`` tokens coming from a variable's value are resolved too.

        Args:
            value: Raw option value
            section: Section the value was read from  # (scope for variable lookups)

        Returns:
            Fully resolved value
        """
        value = unfold(value, VARIABLE_PATTERN, self.variable_lookup(section), self.max_depth)
        return unfold(value, ENVIRONMENT_PATTERN, self.environment_lookup, self.max_depth)

    def variable_lookup(self, section: str) -> LOOKUP_TYPE:
        """Build the lookup for ``%(name)s`` references scoped to section."""

        def lookup(name: str) -> str:
            options = self.sections.get(section, {})
            if name in options:
                return options[name]
            return self.sections.get(self.default_section, {}).get(name, "")

        return lookup

    def environment_lookup(self, name: str) -> str:
        """Lookup for ``${NAME}`` references."""
        return self.environ.get(name, "")
