import nox

PYTHON_VERSIONS = ["3.11", "3.12", "3.13"]
LAYERS = ["domain", "application", "integration", "client", "bdd"]

nox.options.sessions = ["tests"]


def _install(session: nox.Session) -> None:
    session.run("poetry", "install", "--all-extras", external=True)


@nox.session(python=PYTHON_VERSIONS)
def tests(session: nox.Session) -> None:
    """Run the whole suite on every supported interpreter."""
    _install(session)
    session.run("pytest", *session.posargs)


@nox.session(python=PYTHON_VERSIONS[-1])
@nox.parametrize("layer", LAYERS)
def layer(session: nox.Session, layer: str) -> None:
    """Run a single test layer, e.g. ``nox -s "layer(layer='domain')"``."""
    _install(session)
    session.run("pytest", "-m", layer, *session.posargs)
