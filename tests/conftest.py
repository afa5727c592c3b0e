"""Shared pytest configuration for sexpengine.

Hypothesis profiles (select with HYPOTHESIS_PROFILE, or CI=true for "ci"):
    dev      500 examples, random seed (default)
    ci       50 examples, derandomized, failing blobs printed
    verbose  100 examples with per-example output

Tests marked ``@pytest.mark.fuzz`` only run under ``pytest -m fuzz``.
"""

import os

import pytest
from hypothesis import HealthCheck, Phase, Verbosity, settings

from sexpengine.syntax.parser import Grammar, SexpParser

_PHASES = [Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink]

_PROFILES: dict[str, dict[str, object]] = {
    "dev": {"max_examples": 500, "suppress_health_check": [HealthCheck.too_slow]},
    "ci": {
        "max_examples": 50,
        "derandomize": True,
        "print_blob": True,
        "suppress_health_check": [HealthCheck.too_slow],
    },
    "verbose": {"max_examples": 100, "verbosity": Verbosity.verbose},
}

for _name, _options in _PROFILES.items():
    settings.register_profile(_name, phases=_PHASES, **_options)  # type: ignore[arg-type]


def _selected_profile() -> str:
    requested = os.environ.get("HYPOTHESIS_PROFILE", "")
    if requested in _PROFILES:
        return requested
    return "ci" if os.environ.get("CI") == "true" else "dev"


settings.load_profile(_selected_profile())


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Skip fuzz tests unless the marker expression asks for them."""
    if "fuzz" in str(config.getoption("-m", default="")):
        return
    skip_fuzz = pytest.mark.skip(reason="fuzz test; run with: pytest -m fuzz")
    for item in items:
        if item.get_closest_marker("fuzz") is not None:
            item.add_marker(skip_fuzz)


@pytest.fixture
def grammar() -> Grammar:
    """Fresh grammar with the default (recursion-limit derived) nesting depth."""
    return Grammar()


@pytest.fixture
def shallow_parser() -> SexpParser:
    """Parser that rejects lists nested more than three deep."""
    return SexpParser(max_nesting_depth=3)
