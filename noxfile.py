import nox

PYTHON_VERSIONS = ["3.11", "3.12", "3.13"]

# Rebuilt per interpreter so the compiled extension matches the session's Python.
_C_EXT_PACKAGES = ["psycopg2-binary"]


def _install(session: nox.Session) -> None:
    """Install the project and its test extras into the nox virtualenv."""
    session.install("-e", ".[test,postgresql]")
    session.install("--force-reinstall", "--no-cache-dir", *_C_EXT_PACKAGES)


@nox.session(python=PYTHON_VERSIONS)
def tests(session: nox.Session) -> None:
    """Run the full bookstore suite across Python versions."""
    _install(session)
    session.run("pytest", *session.posargs)


@nox.session(python=PYTHON_VERSIONS)
def tests_domain(session: nox.Session) -> None:
    """Run domain-layer tests only (no infrastructure required)."""
    _install(session)
    session.run("pytest", "tests/bookstore/domain/")


@nox.session(python=PYTHON_VERSIONS[-1])
def tests_bdd(session: nox.Session) -> None:
    """Run the pytest-bdd scenarios."""
    _install(session)
    session.run("pytest", "-m", "bdd")
