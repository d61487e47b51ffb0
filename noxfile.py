"""Nox configuration for testing and linting."""

import nox

nox.options.sessions = ["tests", "lint"]
python_versions = ["3.11", "3.12"]

PACKAGE = "tournament_sim"


@nox.session(python=python_versions)
def tests(session):
    """Run the test suite with coverage."""
    session.install("-e", ".[dev]")
    session.run(
        "pytest",
        f"--cov={PACKAGE}",
        "--cov-report=term-missing",
        "--cov-fail-under=85",
        *session.posargs,
    )


@nox.session(python=python_versions[0])
def lint(session):
    """Run ruff for linting and formatting."""
    session.install("ruff>=0.1.0")
    session.run("ruff", "check", PACKAGE, "tests")
    session.run("ruff", "format", "--check", PACKAGE, "tests")


@nox.session(python=python_versions[0])
def format_code(session):
    """Format code with ruff."""
    session.install("ruff>=0.1.0")
    session.run("ruff", "format", PACKAGE, "tests")
    session.run("ruff", "check", "--fix", PACKAGE, "tests")


@nox.session(python=python_versions[0])
def simulate(session):
    """Play one seeded tournament through the CLI."""
    session.install("-e", ".")
    session.run("tourney-sim", "--seed", "2024", *session.posargs)
