import sqlite3

import pytest

from core.auth import AuthService, create_user
from core.services import init_db


@pytest.fixture
def conn():
    connection = sqlite3.connect(":memory:")
    init_db(connection)
    yield connection
    connection.close()


@pytest.fixture
def auth(conn):
    create_user(conn, "Owner@Example.com", "s3cret-pass", "Sam")
    return AuthService(conn, session_days=7)
