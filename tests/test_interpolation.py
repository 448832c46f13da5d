"""Test cases for IniConf reference unfolding.

This module tests the substitution loop and the variable and environment passes.
"""

from typing import Dict

import pytest

from iniconf import (
    CircularInterpolationError,
    Config,
    InterpolationEngine,
    UnresolvedReferenceError,
    unfold,
)
from iniconf.interpolation import ENVIRONMENT_PATTERN, VARIABLE_PATTERN


def test_unfold_without_references_returns_value_unchanged():
    """Given a value without references
    When unfolding it
    Then the lookup is never called and the value comes back as is
    """

    def lookup(name: str) -> str:
        raise AssertionError(f"unexpected lookup of {name}")

    assert unfold("plain value 100% (ok)", VARIABLE_PATTERN, lookup) == "plain value 100% (ok)"
    assert unfold("", ENVIRONMENT_PATTERN, lookup) == ""


def test_unfold_replaces_leftmost_reference_first():
    """Given a value with several references
    When unfolding it
    Then references are looked up from left to right and markers are stripped
    """
    seen = []
    values = {"a": "1", "b": "2"}

    def lookup(name: str) -> str:
        seen.append(name)
        return values[name]

    assert unfold("<%(a)s|%(b)s|%(a)s>", VARIABLE_PATTERN, lookup) == "<1|2|1>"
    assert seen == ["a", "b", "a"]


def test_unfold_environment_markers():
    """Given ``${NAME}`` references
    When unfolding with the environment pattern
    Then the two-character head and one-character tail are removed
    """
    env = {"USER": "gopher", "SHELL": "/bin/sh"}
    assert unfold("${USER} uses ${SHELL}", ENVIRONMENT_PATTERN, lambda n: env.get(n, "")) == "gopher uses /bin/sh"


def test_unfold_resolves_references_inside_replacements():
    """Given a replacement that itself contains a reference
    When unfolding
    Then the chain is resolved within the same call
    """
    values = {"a": "%(b)s!", "b": "%(c)s?", "c": "done"}
    assert unfold("%(a)s", VARIABLE_PATTERN, values.__getitem__) == "done?!"


def test_unfold_empty_lookup_result_is_unresolved():
    """Given a lookup returning an empty string
    When unfolding
    Then an UnresolvedReferenceError names the reference
    """
    with pytest.raises(UnresolvedReferenceError) as exc_info:
        unfold("x=%(missing)s", VARIABLE_PATTERN, lambda name: "")

    assert exc_info.value.name == "missing"
    assert "Option not found: missing" in str(exc_info.value)


def test_unfold_self_reference_hits_max_depth():
    """Given a reference whose value refers to itself
    When unfolding
    Then a CircularInterpolationError reports the maximum depth instead of looping forever
    """
    with pytest.raises(CircularInterpolationError) as exc_info:
        unfold("%(a)s", VARIABLE_PATTERN, lambda name: "%(a)s", max_depth=10)

    assert exc_info.value.max_depth == 10
    assert exc_info.value.references == ["a"] * 10
    assert "max depth of 10 reached" in str(exc_info.value)


def test_unfold_depth_counts_substitutions():
    """Given a chain needing exactly as many substitutions as allowed
    When unfolding with one substitution fewer and one more
    Then only the larger bound succeeds
    """
    values = {"a": "%(b)s", "b": "%(c)s", "c": "end"}

    with pytest.raises(CircularInterpolationError):
        unfold("%(a)s", VARIABLE_PATTERN, values.__getitem__, max_depth=3)
    assert unfold("%(a)s", VARIABLE_PATTERN, values.__getitem__, max_depth=4) == "end"


@pytest.mark.parametrize("max_depth", [0, -1])
def test_engine_rejects_max_depth_below_one(max_depth: int):
    """Given a depth limit that allows no substitution at all
    When building an engine or a store with it
    Then a ValueError is raised instead of failing every later resolution
    """
    with pytest.raises(ValueError, match="max_depth must be at least 1"):
        InterpolationEngine({"DEFAULT": {}}, "DEFAULT", environ={}, max_depth=max_depth)
    with pytest.raises(ValueError, match="max_depth must be at least 1"):
        Config(environ={}, max_depth=max_depth)


def test_engine_max_depth_one_resolves_plain_values():
    config = Config({"DEFAULT": {"plain": "value", "ref": "%(plain)s"}}, environ={}, max_depth=1)

    assert config.get_string("DEFAULT", "plain") == "value"
    with pytest.raises(CircularInterpolationError):
        config.get_string("DEFAULT", "ref")


def test_patterns_ignore_malformed_tokens():
    """Given tokens that do not match the reference syntax
    When unfolding
    Then they are left in place
    """
    text = "%(name) %name)s $HOME ${} ${a b} %()s"
    assert unfold(text, VARIABLE_PATTERN, lambda name: "X") == text
    assert unfold(text, ENVIRONMENT_PATTERN, lambda name: "X") == text


def test_engine_variable_lookup_prefers_section():
    """Given an option defined in both the section and the default section
    When looking it up from the section
    Then the section wins, and the default section fills the gaps
    """
    sections = {"DEFAULT": {"host": "localhost", "port": "80"}, "web": {"host": "example.org"}}
    engine = InterpolationEngine(sections, "DEFAULT", environ={})

    lookup = engine.variable_lookup("web")
    assert lookup("host") == "example.org"
    assert lookup("port") == "80"
    assert lookup("missing") == ""
    assert engine.variable_lookup("nosuchsection")("host") == "localhost"


def test_engine_environment_pass_runs_after_variables():
    """Given a variable whose raw value holds an environment reference
    When resolving
    Then the variable is substituted first and its ``${NAME}`` is resolved in the second pass
    """
    sections = {"DEFAULT": {"root": "${PREFIX}/opt"}, "app": {}}
    engine = InterpolationEngine(sections, "DEFAULT", environ={"PREFIX": "/usr"})

    assert engine.resolve("%(root)s/bin", "app") == "/usr/opt/bin"


def test_engine_environment_value_is_not_unfolded_as_variable():
    """Given an environment value that looks like a variable reference
    When resolving
    Then it stays literal since the variable pass is already over
    """
    engine = InterpolationEngine({"DEFAULT": {"x": "1"}}, "DEFAULT", environ={"RAW": "%(x)s"})
    assert engine.resolve("${RAW}", "DEFAULT") == "%(x)s"


def test_engine_uses_live_process_environment(monkeypatch: pytest.MonkeyPatch):
    """Given no explicit environment
    When resolving after the process environment changed
    Then the current value is used
    """
    engine = InterpolationEngine({"DEFAULT": {}}, "DEFAULT")

    monkeypatch.setenv("INICONF_TEST_TOKEN", "first")
    assert engine.resolve("${INICONF_TEST_TOKEN}", "DEFAULT") == "first"
    monkeypatch.setenv("INICONF_TEST_TOKEN", "second")
    assert engine.resolve("${INICONF_TEST_TOKEN}", "DEFAULT") == "second"

    monkeypatch.delenv("INICONF_TEST_TOKEN")
    with pytest.raises(UnresolvedReferenceError, match="INICONF_TEST_TOKEN"):
        engine.resolve("${INICONF_TEST_TOKEN}", "DEFAULT")


def test_store_example_from_default_and_section(config: Config):
    """Given ``url = http://%(host)s:%(port)s`` in [web] with host only in [DEFAULT]
    When reading the option
    Then both references are resolved from their respective scopes
    """
    assert config.get_string("web", "url") == "http://localhost:8080"


def test_store_default_value_resolved_in_requested_section(config: Config):
    """Given a default option referencing ``%(host)s``
    When it is reached from a section overriding host
    Then the section's host is used
    """
    assert config.get_string("db", "dsn") == "http://db.internal/db"
    assert config.get_string("DEFAULT", "base-url") == "http://localhost"


def test_store_undefined_variable_names_reference(environ: Dict[str, str]):
    """Given ``%(x)s`` with x defined nowhere
    When reading the option
    Then the error names x
    """
    config = Config({"web": {"value": "%(x)s"}}, environ=environ)

    with pytest.raises(UnresolvedReferenceError) as exc_info:
        config.get_string("web", "value")
    assert exc_info.value.name == "x"


def test_store_mutual_references_are_detected(environ: Dict[str, str]):
    """Given two options referencing each other
    When reading either one
    Then a CircularInterpolationError is raised
    """
    config = Config({"DEFAULT": {"a": "%(b)s", "b": "[%(a)s]"}}, environ=environ, max_depth=50)

    with pytest.raises(CircularInterpolationError) as exc_info:
        config.get_string("DEFAULT", "a")
    assert exc_info.value.max_depth == 50


def test_store_empty_variable_value_counts_as_missing(environ: Dict[str, str]):
    """Given a referenced option whose value is empty
    When reading the referencing option
    Then the empty value cannot be substituted
    """
    config = Config({"DEFAULT": {"empty": "", "value": "<%(empty)s>"}}, environ=environ)

    assert config.get_string("DEFAULT", "empty") == ""
    with pytest.raises(UnresolvedReferenceError, match="empty"):
        config.get_string("DEFAULT", "value")
