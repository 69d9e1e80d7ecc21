"""Ensure tests import mahoraga from this checkout, not from an external editable install."""

import os
import sys
from pathlib import Path

import pytest
from hypothesis import HealthCheck, Verbosity, settings

# Prepend this checkout's src/ so tests always use local code,
# even when pytest is invoked by a Python from a different venv.
_src = str(Path(__file__).resolve().parent.parent / "src")
if _src not in sys.path:
    sys.path.insert(0, _src)

# The autouse config-home fixture is function scoped; its state is never mutated by examples
SUPPRESSED = [HealthCheck.function_scoped_fixture]
settings.register_profile(
    "default", max_examples=100, verbosity=Verbosity.normal, deadline=None, suppress_health_check=SUPPRESSED
)
settings.register_profile(
    "ci", max_examples=300, verbosity=Verbosity.normal, deadline=None, suppress_health_check=SUPPRESSED
)
settings.register_profile(
    "dev", max_examples=10, verbosity=Verbosity.verbose, deadline=None, suppress_health_check=SUPPRESSED
)
settings.load_profile(os.getenv("HYPOTHESIS_PROFILE", "default"))


def pytest_addoption(parser: pytest.Parser) -> None:
    parser.addoption(
        "--run-textual-integration",
        action="store_true",
        default=False,
        help="Run Textual integration tests (slow, uses app.run_test() + Pilot)",
    )


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    if config.getoption("--run-textual-integration"):
        return
    skip = pytest.mark.skip(reason="needs --run-textual-integration flag to run")
    for item in items:
        if "textual_integration" in item.keywords:
            item.add_marker(skip)


@pytest.fixture(autouse=True)
def isolated_config_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point config lookups at a temp dir so tests never touch ~/.config."""
    home = tmp_path / "xdg"
    monkeypatch.setenv("XDG_CONFIG_HOME", str(home))
    monkeypatch.delenv("MAHORAGA_CONFIG", raising=False)
    return home
