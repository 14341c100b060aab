import os
from collections.abc import Generator
from typing import Any

import psycopg
import pytest

from docrouter.config.settings import Settings
from docrouter.database.connection import close_pool, get_connection, init_pool

ROUTER_DECISIONS_DDL = """
CREATE TABLE IF NOT EXISTS router_decisions (
    id BIGSERIAL PRIMARY KEY,
    decided_at TIMESTAMPTZ NOT NULL,
    tier TEXT NOT NULL,
    constants_version TEXT NOT NULL,
    profile JSONB NOT NULL,
    config JSONB NOT NULL,
    estimated_cost DOUBLE PRECISION NOT NULL,
    actual_cost DOUBLE PRECISION NOT NULL,
    estimated_time DOUBLE PRECISION NOT NULL,
    actual_time DOUBLE PRECISION NOT NULL,
    success BOOLEAN NOT NULL
)
"""


def _test_settings() -> Settings:
    os.environ.setdefault("DB_DATABASE", "docrouter_test")
    return Settings()


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    return _test_settings()


@pytest.fixture(scope="session")
def integration_pool(test_settings: Settings) -> Generator[None, None, None]:
    try:
        init_pool(test_settings)
        with get_connection() as conn:
            conn.execute(ROUTER_DECISIONS_DDL)
            conn.commit()
    except Exception as e:
        close_pool()
        pytest.skip(f"PostgreSQL test DB not available: {e}. Set DB_* env to run.")
    try:
        yield
    finally:
        close_pool()


@pytest.fixture
def db_conn(integration_pool: None) -> Generator[psycopg.Connection[Any], None, None]:
    with get_connection() as conn:
        yield conn


@pytest.fixture
def integration_cleanup() -> Generator[list[int], None, None]:
    decision_ids: list[int] = []
    yield decision_ids
    if not decision_ids:
        return
    with get_connection() as conn:
        with conn.cursor() as cur:
            for row_id in decision_ids:
                cur.execute("DELETE FROM router_decisions WHERE id = %s", (row_id,))
        conn.commit()
