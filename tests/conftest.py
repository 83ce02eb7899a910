"""Shared test fixtures for helpspec.

Provides the saved introspection payloads, an isolated config environment,
output managers, and a CLI runner. These fixtures are discovered by pytest
and available to all test modules without explicit imports.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

from helpspec.models import IntrospectionPayloads
from helpspec.output import OutputFormat, OutputManager, reset_output, set_output


FIXTURES_DIR = Path(__file__).parent / "fixtures"


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager caches references to sys.stdout/sys.stderr at
    creation time. When Typer's CliRunner redirects those streams and the
    test finishes, the cached references become stale. Resetting forces a
    fresh manager on next use.
    """
    yield
    reset_output()


# ---------------------------------------------------------------------------
# Payload fixtures (plain dicts loaded from JSON files)
# ---------------------------------------------------------------------------


def _load(name: str) -> dict[str, Any]:
    with open(FIXTURES_DIR / name) as f:
        return json.load(f)


@pytest.fixture
def console_help() -> dict[str, Any]:
    """The ``/help?format=Console`` payload."""
    return _load("console_help.json")


@pytest.fixture
def full_help() -> dict[str, Any]:
    """The ``/help?format=Full`` payload."""
    return _load("full_help.json")


@pytest.fixture
def app_info() -> dict[str, Any]:
    return _load("app_info.json")


@pytest.fixture
def payloads(
    console_help: dict[str, Any],
    full_help: dict[str, Any],
    app_info: dict[str, Any],
) -> IntrospectionPayloads:
    return IntrospectionPayloads(
        console=console_help,
        full=full_help,
        app_info=app_info,
        base_url="https://127.0.0.1:51234",
    )


@pytest.fixture
def payload_dir(
    tmp_path: Path,
    console_help: dict[str, Any],
    full_help: dict[str, Any],
    app_info: dict[str, Any],
) -> Path:
    """A directory laid out the way ``helpspec dump`` writes it."""
    directory = tmp_path / "payloads"
    directory.mkdir()
    (directory / "console.json").write_text(json.dumps(console_help))
    (directory / "full.json").write_text(json.dumps(full_help))
    (directory / "app-info.json").write_text(
        json.dumps({**app_info, "baseUrl": "https://127.0.0.1:51234"})
    )
    return directory


# ---------------------------------------------------------------------------
# Config isolation fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate configuration to a temporary directory.

    Points the XDG directories at subdirectories of tmp_path, clears the
    environment variables helpspec reads, and changes the working
    directory to tmp_path.

    Returns:
        The tmp_path root directory for additional file creation.
    """
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))

    for var in [
        "HELPSPEC_PORT",
        "HELPSPEC_SECRET_SOURCE",
        "HELPSPEC_OUTPUT",
        "PORT",
        "SECRET",
        "NO_COLOR",
    ]:
        monkeypatch.delenv(var, raising=False)

    monkeypatch.chdir(tmp_path)
    return tmp_path


# ---------------------------------------------------------------------------
# Output fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def quiet_output() -> OutputManager:
    """Install a quiet PLAIN OutputManager for tests that don't care about output."""
    output = OutputManager(format=OutputFormat.PLAIN, quiet=True)
    set_output(output)
    yield output
    reset_output()


@pytest.fixture
def verbose_output() -> OutputManager:
    """Install a verbose, colourless OutputManager so debug diagnostics reach stderr."""
    output = OutputManager(format=OutputFormat.PLAIN, no_color=True, verbose=True)
    set_output(output)
    yield output
    reset_output()


# ---------------------------------------------------------------------------
# CLI runner fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def cli_runner():
    """Typer CLI test runner."""
    from typer.testing import CliRunner

    return CliRunner()
