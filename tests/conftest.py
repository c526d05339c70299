# tests/conftest.py
from datetime import UTC, datetime

import pytest

from docnum import create_app
from docnum.extensions import db as _db
from tests.fixtures.sample_data import FIXED_NOW


@pytest.fixture(scope="function")
def app():
    """
    Creates a fresh app on an in-memory SQLite database for each test.
    Tables are created by the factory itself (AUTO_CREATE_TABLES).
    """
    app = create_app("testing")
    with app.app_context():
        yield app

        _db.session.remove()
        _db.drop_all()


@pytest.fixture(scope="function")
def db_session(app):
    """The scoped session bound to the test's app context."""
    yield _db.session
    _db.session.rollback()


@pytest.fixture(scope="function")
def client(app):
    """Creates a standard test client."""
    return app.test_client()


@pytest.fixture(scope="function")
def cli_runner(app):
    return app.test_cli_runner()


@pytest.fixture
def now():
    return FIXED_NOW


@pytest.fixture
def current_year():
    return datetime.now(UTC).year
