"""Nox sessions for WavePlay development tasks."""

from __future__ import annotations

import nox

PACKAGE = "src/waveplay"
COVERAGE_FLOOR = "80"

nox.options.error_on_missing_interpreters = False
nox.options.sessions = ["lint", "tests", "typecheck"]


@nox.session
def lint(session: nox.Session) -> None:
    """Run ruff linting and formatting checks."""
    session.install("ruff")
    session.run("ruff", "check", ".")
    session.run("ruff", "format", "--check", ".")


@nox.session(name="lint-fix")
def lint_fix(session: nox.Session) -> None:
    """Apply ruff fixes and formatting."""
    session.install("ruff")
    session.run("ruff", "check", "--fix", ".")
    session.run("ruff", "format", ".")


@nox.session
def tests(session: nox.Session) -> None:
    """Run pytest with VLC-dependent tests skipped."""
    session.install("-e", ".[dev]")
    session.run("pytest", "-q", *session.posargs, env={"WAVEPLAY_CI": "1"})


@nox.session(name="tests-vlc")
def tests_vlc(session: nox.Session) -> None:
    """Run only the tests marked as touching the VLC wrapper."""
    session.install("-e", ".[dev]")
    session.run("pytest", "-q", "-m", "vlc", *session.posargs)


@nox.session
def typecheck(session: nox.Session) -> None:
    """Run mypy using the [tool.mypy] table in pyproject.toml."""
    session.install("-e", ".")
    session.install("mypy")
    session.run("mypy", PACKAGE)


@nox.session
def coverage(session: nox.Session) -> None:
    """Run coverage reporting."""
    session.install("-e", ".[dev]")
    session.install("coverage")
    session.run(
        "coverage", "run", "--source=waveplay", "-m", "pytest", env={"WAVEPLAY_CI": "1"}
    )
    session.run("coverage", "report", f"--fail-under={COVERAGE_FLOOR}", "-m")


@nox.session
def build(session: nox.Session) -> None:
    """Build sdist and wheel artifacts."""
    session.install("build")
    session.run("python", "-m", "build")


@nox.session(name="tests-dev", venv_backend="none")
def tests_dev(session: nox.Session) -> None:
    """Fast local pytest using the active venv."""
    session.run("python", "-m", "pytest", "-q", *session.posargs, external=True)
