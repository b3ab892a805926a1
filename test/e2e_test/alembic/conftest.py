"""Fixtures for Alembic migration tests."""

import pytest

from test.settings import test_settings


@pytest.fixture(scope="session")
def postgres_url() -> str:
    """Start a throwaway PostgreSQL container and return its asyncpg URL."""
    if not test_settings.database.enable_postgres_tests:
        pytest.skip("PostgreSQL tests are disabled (set DATABASE__ENABLE_POSTGRES_TESTS=true)")

    from testcontainers.postgres import PostgresContainer

    with PostgresContainer(test_settings.database.postgres_image, driver="asyncpg") as postgres:
        yield postgres.get_connection_url()
