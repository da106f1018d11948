"""Nox sessions for the league insights package."""

import nox

nox.options.sessions = ["lint", "typecheck", "tests"]

PYTHON_VERSIONS = ["3.11", "3.12", "3.13"]
LINT_TARGETS = ["src", "tests", "noxfile.py"]


@nox.session(python=PYTHON_VERSIONS)
def tests(session: nox.Session) -> None:
    """Run the pytest suite with coverage."""
    session.install("-e", ".[dev]")
    session.run("pytest", *session.posargs)


@nox.session
def lint(session: nox.Session) -> None:
    """Ruff lint and format check."""
    session.install("ruff")
    session.run("ruff", "check", *LINT_TARGETS)
    session.run("ruff", "format", "--check", *LINT_TARGETS)


@nox.session
def typecheck(session: nox.Session) -> None:
    session.install("-e", ".[dev]")
    session.run("mypy", "src/fpl_league_insights")


@nox.session
def smoke(session: nox.Session) -> None:
    """Fetch a live what-if report; pass the manager ID as a positional arg."""
    session.install("-e", ".")
    manager_id = session.posargs[0] if session.posargs else "1"
    session.run(
        "fpl-league-insights", "--verbose", "what-if", "--manager-id", manager_id
    )
