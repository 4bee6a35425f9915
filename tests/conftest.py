"""Shared fixtures for the Davko test-suite."""

import sys
from pathlib import Path

# Make ``src`` importable when pytest runs from a plain checkout.
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

import pytest  # noqa: E402
from flask import Flask  # noqa: E402
from flask.testing import FlaskClient  # noqa: E402

from davko.backend.app import create_app  # noqa: E402
from davko.backend.config.year_config import (  # noqa: E402
    YearConfiguration,
    load_year_configuration,
)


@pytest.fixture()
def app() -> Flask:
    """Return a configured Flask application for integration tests."""

    application = create_app()
    application.config.update(TESTING=True)
    return application


@pytest.fixture()
def client(app: Flask) -> FlaskClient:
    return app.test_client()


@pytest.fixture()
def config_2025() -> YearConfiguration:
    return load_year_configuration(2025)


@pytest.fixture()
def config_2026() -> YearConfiguration:
    return load_year_configuration(2026)
