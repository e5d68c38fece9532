import os
from pathlib import Path
import nox

# Reuse existing virtualenvs for faster runs
nox.options.reuse_existing_virtualenvs = True
# Default sessions when running "nox"
nox.options.sessions = ["lint", "unit", "integration"]

# Common dependencies for test sessions
COMMON_DEPS = ["-e", ".[test]"]

# Environment variables to propagate
PASSED_ENV_VARS = [
    "DATABASE_URL",
    "ENVIRONMENT",
    "LOG_LEVEL",
    "CHECKIN_TTL_MINUTES",
    "PLACES_API_URL",
]


def _set_env(session):
    """
    Propagate database and test-related environment variables into the session.
    Also ensure the project root is on PYTHONPATH.
    """
    session.env["PYTHONPATH"] = str(Path.cwd())
    for var in PASSED_ENV_VARS:
        if var in os.environ:
            session.env[var] = os.environ[var]


@nox.session(name="lint")
def lint(session):
    """
    Code formatting, linting, and type-checks:
      - isort
      - black
      - flake8
      - mypy
    """
    _set_env(session)
    session.install("isort", "black", "flake8", "mypy")
    session.run("isort", "groupshare/", "tests/")
    session.run("black", "groupshare/", "tests/")
    session.run("flake8", "groupshare/", "tests/")
    session.run("mypy", "groupshare/")


@nox.session(name="unit")
def unit(session):
    """
    Run unit tests (services, store, core helpers) against in-memory SQLite.
    Usage:
      nox -s unit
      nox -s unit -- tests/unit/test_services/test_accommodation.py
    """
    _set_env(session)
    session.install(*COMMON_DEPS)
    tests = session.posargs or ["tests/unit"]
    session.run(
        "pytest",
        *tests,
        "--maxfail=1",
        "-vv",
        "--tb=short",
        "--cov=groupshare",
        "--cov-report=term-missing",
        "--cov-report=html:.nox/htmlcov",
        "--cov-report=xml",
        "--cov-fail-under=80",
    )


@nox.session(name="integration")
def integration(session):
    """
    Run API tests through the FastAPI TestClient.
    Usage:
      nox -s integration
      nox -s integration -- tests/integration/test_api/test_members_api.py
    """
    _set_env(session)
    session.install(*COMMON_DEPS)
    tests = session.posargs or ["tests/integration"]
    session.run(
        "pytest",
        *tests,
        "--maxfail=1",
        "-vv",
        "--tb=short",
    )
