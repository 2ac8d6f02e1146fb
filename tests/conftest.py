import os
from pathlib import Path

import pytest

# Test directory name -> marker applied to everything collected under it
_LAYER_MARKERS = ("domain", "application", "integration", "client", "bdd")


def pytest_addoption(parser):
    parser.addoption(
        "--env",
        action="store",
        default="test",
        help="domain.toml overlay to run the suite against",
    )


def pytest_configure(config):
    """Select the config overlay before any test module imports reviewhub.domain."""
    os.environ["PROTEAN_ENV"] = config.getoption("env")
    os.environ.setdefault("LOG_LEVEL", "WARNING")


def pytest_collection_modifyitems(config, items):
    for item in items:
        parts = Path(str(item.fspath)).parts

        layer = next((name for name in _LAYER_MARKERS if name in parts), None)
        if layer is not None:
            item.add_marker(getattr(pytest.mark, layer))

        # Integration tests run the full projector chain
        if layer == "integration" and item.get_closest_marker("fast") is None:
            item.add_marker(pytest.mark.slow)
