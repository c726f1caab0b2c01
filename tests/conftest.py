"""
Pytest configuration and fixtures for content-verify-log tests

This module provides shared fixtures for unit and integration tests.
"""
import json
import os
import shutil
from typing import Any, Generator

import pytest
from pyspark.sql import SparkSession
from testcontainers.postgres import PostgresContainer

from content_verify.core.models import RawRecord
from content_verify.warehouse.connection import DatabaseConnectionPool


# =======================
# PYTEST CONFIGURATION
# =======================

def pytest_configure(config):
    """Configure pytest with custom markers"""
    config.addinivalue_line(
        "markers", "unit: Unit tests that don't require external services"
    )
    config.addinivalue_line(
        "markers", "integration: Integration tests that require Docker or a Spark runtime"
    )
    config.addinivalue_line(
        "markers", "e2e: End-to-end tests that run the CLI against real services"
    )
    config.addinivalue_line(
        "markers", "slow: Tests that take more than 5 seconds to run"
    )


# =======================
# PAYLOAD FIXTURES
# =======================

LEGACY_MARKED = '<span style="background-color:yellow;">bad</span> text'


def make_record(data: Any, record_id: str = "1", task_id: str = "task-1", wrap: bool = True) -> RawRecord:
    """Build a RawRecord whose content is ``{"data": data}`` (or ``data`` itself)."""
    document = {"data": data} if wrap else data
    return RawRecord(
        record_id=record_id,
        task_id=task_id,
        content=json.dumps(document, ensure_ascii=False),
    )


@pytest.fixture
def record_factory():
    """Factory for RawRecords built from a data object"""
    return make_record


@pytest.fixture
def legacy_record() -> RawRecord:
    """Legacy record whose only correction needs the first-occurrence fallback"""
    return make_record({
        "checkresultstr": LEGACY_MARKED,
        "checkresultjson": json.dumps([{"errword": "bad", "corword": ["good"], "pos": 0}]),
    })


@pytest.fixture
def revised_record() -> RawRecord:
    """Revised record with one checklist item"""
    return make_record({
        "replace_text": '<span class="error">teh</span> cat sat',
        "checklist": [{"pos": 0, "len": 3, "word": "teh", "suggest": ["the"]}],
    }, record_id="2")


# =======================
# SPARK FIXTURES
# =======================

@pytest.fixture(scope="session")
def spark_session() -> Generator[SparkSession, None, None]:
    """
    Create a Spark session for testing with local mode

    Yields:
        SparkSession configured for local testing
    """
    if not (os.getenv("JAVA_HOME") or shutil.which("java")):
        pytest.skip("Java runtime not available for Spark")

    spark = (
        SparkSession.builder
        .appName("content-verify-test")
        .master("local[2]")
        .config("spark.sql.shuffle.partitions", "2")
        .config("spark.driver.memory", "1g")
        .config("spark.ui.enabled", "false")  # Disable UI for tests
        .getOrCreate()
    )

    # Set log level to WARN to reduce test output noise
    spark.sparkContext.setLogLevel("WARN")

    yield spark

    spark.stop()


# =======================
# DATABASE FIXTURES (Testcontainers)
# =======================

@pytest.fixture(scope="session")
def postgres_container() -> Generator[PostgresContainer, None, None]:
    """
    Start PostgreSQL container for integration tests

    Yields:
        PostgresContainer instance
    """
    container = PostgresContainer(
        image="postgres:16.2-alpine",
        username="test_pipeline",
        password="test_password",
        dbname="test_verify"
    )
    try:
        container.start()
    except Exception as e:  # Docker daemon missing or unreachable
        pytest.skip(f"Docker not available: {e}")

    try:
        yield container
    finally:
        container.stop()


@pytest.fixture(scope="function")
def db_pool(postgres_container) -> Generator[DatabaseConnectionPool, None, None]:
    """
    Provide an open connection pool against the test container

    Yields:
        DatabaseConnectionPool
    """
    pool = DatabaseConnectionPool(
        host=postgres_container.get_container_host_ip(),
        port=int(postgres_container.get_exposed_port(5432)),
        database="test_verify",
        user="test_pipeline",
        password="test_password",
    )
    pool.open()
    yield pool
    pool.close()
