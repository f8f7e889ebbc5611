"""Nox sessions for Bubble Replay development tasks."""

from __future__ import annotations

import sys

import nox

nox.options.error_on_missing_interpreters = False
nox.options.sessions = ["lint", "typecheck", "tests"]

PACKAGE = "src/bubble_replay"


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
    """Run pytest in CI mode (real-VLC tests skipped)."""
    session.install("-e", ".[dev]")
    session.run("pytest", "-q", env={"BUBBLE_REPLAY_CI": "1"})


@nox.session
def typecheck(session: nox.Session) -> None:
    session.install("-e", ".[dev]")
    session.run("mypy", PACKAGE)


@nox.session
def smoke(session: nox.Session) -> None:
    """Dump a small history headlessly to prove the entry point works."""
    session.install("-e", ".")
    session.run("bubble-replay", "--dump", "--values", "5", "3", "8", "1")
    session.run("bubble-replay", "--dump", "--early-exit", "--size", "5", "--seed", "1")


@nox.session
def coverage(session: nox.Session) -> None:
    session.install("-e", ".[dev]")
    session.run("coverage", "run", "--source=bubble_replay", "-m", "pytest")
    session.run("coverage", "report", "--fail-under=80", "-m")


@nox.session
def build(session: nox.Session) -> None:
    """Build sdist and wheel artifacts."""
    session.install("build")
    session.run("python", "-m", "build")


# --------------------------------------------------
#                  LOCAL DEV TESTING
# --------------------------------------------------


@nox.session(name="tests-dev", venv_backend="none")
def tests_dev(session: nox.Session) -> None:
    """Fast local pytest using the active venv."""
    session.run("python", "-m", "pytest", "-q", external=True)


@nox.session(name="local-dev", venv_backend="none")
def local_dev(session: nox.Session) -> None:
    """Run lint, typecheck and tests against the active venv."""
    session.run("python", "-m", "ruff", "check", "--fix", ".", external=True)
    session.run("python", "-m", "ruff", "format", ".", external=True)
    session.run("python", "-m", "mypy", PACKAGE, external=True)
    session.run("python", "-m", "pytest", "-q", external=True)
    session.run(
        sys.executable,
        "-m",
        "bubble_replay.cli",
        "--dump",
        "--size",
        "5",
        external=True,
    )
