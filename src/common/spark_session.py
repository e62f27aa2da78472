"""
Shared SparkSession utilities for the motif search jobs.

Spark is the execution substrate of the map/reduce engine: it provides the
parallel workers, the shuffle and the text record store.

Logging is configured via conf/log4j2.properties to:
- Write INFO logs to .logs/spark.log
- Only show ERROR on console (driver-side progress goes through Python logging)
"""

import os
from pathlib import Path

from pyspark.sql import SparkSession

# Project root directory
PROJECT_ROOT = Path(__file__).parent.parent.parent

# Path to log4j2 config
LOG4J2_CONFIG = PROJECT_ROOT / "conf" / "log4j2.properties"

# Final app name will be: APP_NAME_PREFIX-<script_name>
APP_NAME_PREFIX = "MedianMotif"


def _ensure_logs_dir() -> None:
    """Ensure .logs directory exists."""
    logs_dir = PROJECT_ROOT / ".logs"
    logs_dir.mkdir(exist_ok=True)


def _snake_to_title(snake_str: str) -> str:
    """
    Convert snake_case string to TitleCase.

    Examples:
        median_string_search -> MedianStringSearch
        cli -> Cli
    """
    return "".join(word.capitalize() for word in snake_str.split("_"))


def _parse_script_identifier(script_id: str | None) -> str | None:
    """
    Parse a script identifier, which can be either a file path or a name.

    If it looks like a file path (contains / or ends with .py), extract
    the filename and convert from snake_case to TitleCase.
    """
    if script_id is None:
        return None

    if "/" in script_id or script_id.endswith(".py"):
        stem = Path(script_id).stem
        return _snake_to_title(stem)

    return script_id


def _build_app_name(script_name: str | None = None) -> str:
    """
    Build the full application name.

    Returns:
        Full app name like "MedianMotif" or "MedianMotif-Cli"
    """
    if script_name:
        return f"{APP_NAME_PREFIX}-{script_name}"
    return APP_NAME_PREFIX


def create_spark_session(
    script_name: str | None = None,
    master: str = "local[*]",
) -> SparkSession:
    """
    Create a SparkSession with common configurations.

    Args:
        script_name: Identifier for this job. Can be either:
                     - A file path like __file__ (auto-converts snake_case to TitleCase)
                     - A direct name like "MedianStringSearch"
        master: Spark master URL (default: local[*] for local runs)

    Returns:
        Configured SparkSession instance
    """
    _ensure_logs_dir()

    parsed_name = _parse_script_identifier(script_name)
    app_name = _build_app_name(parsed_name)

    # Change working directory context for log4j file output
    original_cwd = os.getcwd()
    os.chdir(PROJECT_ROOT)

    try:
        builder = SparkSession.builder.appName(app_name).master(master)

        if LOG4J2_CONFIG.exists():
            builder = builder.config(
                "spark.driver.extraJavaOptions",
                f"-Dlog4j.configurationFile=file:{LOG4J2_CONFIG}",
            )

        spark = (
            builder.config("spark.sql.shuffle.partitions", "4")
            .config("spark.executorEnv.PYTHONPATH", str(PROJECT_ROOT))
            .config("spark.driver.memory", "2g")
            .config("spark.ui.showConsoleProgress", "false")
            .getOrCreate()
        )

        spark.sparkContext.setLogLevel("ERROR")

        return spark
    finally:
        os.chdir(original_cwd)
