"""
Test configuration and fixtures for the data gateway.

Provides an in-memory SQLite engine with the test schema, a deterministic
clock, and gateways bound to both.
"""

import sys
from pathlib import Path

# Add parent directory to path so we can import data_gateway and tests.helpers
sys.path.insert(0, str(Path(__file__).parent.parent))

import pytest
import sqlalchemy as sa
from sqlalchemy.pool import StaticPool

from data_gateway import DatabaseConfig, DataGateway
from tests.helpers import FakeClock, build_metadata


@pytest.fixture
def database_config():
    """Database configuration for testing."""
    return DatabaseConfig(
        database_url="sqlite://",
        environment="test",
        table_prefix=""
    )


@pytest.fixture
def metadata():
    return build_metadata()


@pytest.fixture
def engine(metadata):
    """In-memory SQLite engine shared across connections, with all test tables created."""
    engine = sa.create_engine(
        "sqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def gateway(engine, clock):
    """Gateway bound to the test engine and the deterministic clock."""
    return DataGateway(engine, clock=clock)


@pytest.fixture
def fetch_rows(engine, metadata):
    """Read raw rows straight from a table, ordered by id."""
    def _fetch(table_name):
        table = metadata.tables[table_name]
        with engine.connect() as conn:
            return [dict(row) for row in conn.execute(sa.select(table).order_by(table.c.id)).mappings()]
    return _fetch


# Sample Data Fixtures

@pytest.fixture
def sample_user_data():
    """Sample user account data for testing."""
    return {
        "name": "Ada Lovelace",
        "email": "ada@example.com",
        "is_active": True,
    }


@pytest.fixture
def seeded_users(engine, metadata):
    """Three user_account rows inserted directly, bypassing the gateway."""
    table = metadata.tables['user_account']
    rows = [
        {"name": "Ada", "email": "ada@example.com", "is_active": True},
        {"name": "Grace", "email": "grace@example.com", "is_active": False},
        {"name": "Linus", "email": "linus@example.com", "is_active": True},
    ]
    with engine.begin() as conn:
        conn.execute(sa.insert(table), rows)
    return rows
