"""Nox sessions for multi-version Python compatibility testing.

Usage:
    nox                     # run all sessions
    nox -s tests            # offline test suite
    nox -s live             # live Reddit integration tests (network)
    nox -s lint             # lint only
    nox -l                  # list available sessions

Requires Python 3.11-3.14 installed locally (e.g. via pyenv or uv).
"""

import nox

PYTHON_VERSIONS = ["3.11", "3.12", "3.13", "3.14"]
OFFLINE_TESTS = [
    "tests.test_models",
    "tests.test_parser",
    "tests.test_client",
    "tests.test_render_markdown",
    "tests.test_render_json",
    "tests.test_mcp_server",
    "tests.test_cli",
    "tests.test_config",
    "tests.test_packaging",
]


@nox.session(python=PYTHON_VERSIONS)
def tests(session: nox.Session) -> None:
    """Run the offline test suite across Python versions."""
    session.install("-e", ".[dev]")
    session.run("python", "-m", "unittest", *OFFLINE_TESTS, "-v")


@nox.session(python="3.13")
def live(session: nox.Session) -> None:
    """Run the integration tests against live Reddit."""
    session.install("-e", ".[dev]")
    session.run(
        "python", "-m", "unittest", "tests.test_integration", "-v",
        env={"RMCP_LIVE_TESTS": "1"},
    )


@nox.session(python=PYTHON_VERSIONS)
def lint(session: nox.Session) -> None:
    """Run ruff linter across Python versions."""
    session.install("ruff>=0.15")
    session.run("ruff", "check", "src/", "tests/")
