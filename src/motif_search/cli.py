"""
Median String Motif Search - command-line entry point.

Usage:
    median-motif-search INPUT WORK OUTPUT [MOTIF_LENGTH]
    python -m src.motif_search.cli INPUT WORK OUTPUT [MOTIF_LENGTH]

INPUT holds one DNA sequence per line. WORK receives the intermediate
stage outputs and OUTPUT the per-sequence alignments of the consensus motif.
Exit status is 0 on success and 1 if the configuration is invalid or any
stage fails.
"""

import argparse
import logging
import sys

from src.common.spark_session import create_spark_session
from src.motif_search.errors import ConfigurationError, MotifSearchError
from src.motif_search.pipeline import (
    DEFAULT_MOTIF_LENGTH,
    MedianMotifPipeline,
    PipelineConfig,
    PipelineResult,
)
from src.motif_search.records import format_alignment

logger = logging.getLogger(__name__)


def parse_count(name: str, value: str | None) -> int | None:
    """Convert a numeric argument, reporting bad input as a ConfigurationError."""
    if value is None:
        return None
    try:
        return int(value)
    except ValueError as exc:
        raise ConfigurationError(f"{name} must be an integer, got {value!r}") from exc


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="median-motif-search",
        description="Find the median string motif of a set of DNA sequences.",
    )
    parser.add_argument("input_path", help="Sequences, one per line")
    parser.add_argument("work_path", help="Location for intermediate stage outputs")
    parser.add_argument("output_path", help="Location for the final alignments")
    parser.add_argument(
        "motif_length",
        nargs="?",
        default=str(DEFAULT_MOTIF_LENGTH),
        help=f"Motif length L (default: {DEFAULT_MOTIF_LENGTH})",
    )
    parser.add_argument(
        "--num-reducers",
        default=None,
        help="Reducers for the total-distance and re-alignment stages",
    )
    parser.add_argument("--master", default="local[*]", help="Spark master URL")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser


def print_results(result: PipelineResult) -> None:
    """Print the consensus motif and its alignment in every sequence."""
    print("\n--- Results ---")
    print(f"Consensus motif: {result.consensus_motif}")
    print(f"Total Hamming distance: {result.total_distance}")
    print(f"\nAlignments ({len(result.alignments)} sequences):")
    print("  motif\tmatch\tseq_id\tdistance\tindex\ttotal")
    for match in result.alignments:
        print(f"  {format_alignment(match)}")


def main(argv: list[str] | None = None) -> int:
    """Run the pipeline and return the process exit status."""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        # Reject bad arguments before paying for a Spark session
        config = PipelineConfig(
            input_path=args.input_path,
            work_path=args.work_path,
            output_path=args.output_path,
            motif_length=parse_count("Motif length", args.motif_length),
            num_reducers=parse_count("Reducer count", args.num_reducers),
        )
        config.validate()
    except MotifSearchError as exc:
        logger.error("%s", exc)
        return 1

    spark = create_spark_session(__file__, master=args.master)
    try:
        result = MedianMotifPipeline(spark.sparkContext, config).run()
    except MotifSearchError as exc:
        logger.error("%s", exc)
        return 1
    finally:
        spark.stop()

    print_results(result)
    return 0


if __name__ == "__main__":
    sys.exit(main())
