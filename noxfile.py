import nox

PYTHON_VERSIONS = ["3.11", "3.12", "3.13"]

# psycopg2 ships a C extension that Poetry may serve from a wheel built
# for a different interpreter.
_REBUILD = ["psycopg2-binary"]


def _install(session: nox.Session) -> None:
    """Install the marketplace and its test group into the session virtualenv."""
    session.run("poetry", "install", "--with", "test", "--all-extras", external=True)
    session.run("pip", "install", "--force-reinstall", "--no-cache-dir", *_REBUILD)


@nox.session(python=PYTHON_VERSIONS)
def tests(session: nox.Session) -> None:
    """Run the whole suite."""
    _install(session)
    session.run("pytest", *session.posargs)


@nox.session(python=PYTHON_VERSIONS[-1])
def unit(session: nox.Session) -> None:
    """Aggregates and command handlers only; no HTTP stack involved."""
    _install(session)
    session.run("pytest", "-m", "domain or application", *session.posargs)


@nox.session(python=PYTHON_VERSIONS[-1])
def api(session: nox.Session) -> None:
    """Endpoint, projection and scenario tests."""
    _install(session)
    session.run("pytest", "-m", "integration or bdd", *session.posargs)
