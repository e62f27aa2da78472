"""
Pytest configuration and shared fixtures for the motif search tests.
"""

import os
from pathlib import Path

import pytest
from pyspark.sql import SparkSession

PROJECT_ROOT = Path(__file__).parent.parent
WORKER_PYTHONPATH = os.pathsep.join([str(PROJECT_ROOT), str(PROJECT_ROOT / "tests")])


@pytest.fixture(scope="session")
def spark() -> SparkSession:
    """
    Create a SparkSession for testing.

    Uses session scope to reuse the same Spark context across all tests,
    which significantly speeds up test execution.
    """
    spark = (
        SparkSession.builder
        .appName("pytest-pyspark")
        .master("local[2]")  # Use 2 cores for testing
        .config("spark.sql.shuffle.partitions", "2")  # Reduce partitions for faster tests
        .config("spark.ui.enabled", "false")  # Disable Spark UI for tests
        .config("spark.driver.memory", "1g")
        # Python workers import src.* and the test modules by name
        .config("spark.executorEnv.PYTHONPATH", WORKER_PYTHONPATH)
        .getOrCreate()
    )

    # Set log level to reduce noise during tests
    spark.sparkContext.setLogLevel("WARN")

    yield spark

    spark.stop()


@pytest.fixture(scope="session")
def sc(spark: SparkSession):
    """
    Get SparkContext from the SparkSession fixture.

    Useful for RDD-based tests.
    """
    return spark.sparkContext


@pytest.fixture
def write_lines(tmp_path: Path):
    """Return a helper writing lines to a fresh text file under tmp_path."""

    def _write(name: str, lines: list[str]) -> str:
        path = tmp_path / name
        path.write_text("".join(f"{line}\n" for line in lines), encoding="utf-8")
        return str(path)

    return _write
