"""
Median string motif search pipeline.

Chains the three stages through the record store:

    input ──► TotalHammingDistanceJob ──► <work>/total_hamming_distance
                                                  │
                                                  ▼
              ConsensusStringSearchJob ──► <work>/consensus_motif
                                                  │
    input ─────────────┬──────────────────────────┘
                       ▼
              MedianMotifStringSearchJob ──► output

The first failing stage aborts the pipeline; later stages never run and no
result is read back.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import NamedTuple

from pyspark import SparkContext

from src.common.record_store import TextRecordStore, is_remote, local_path
from src.motif_search.engine import MapReduceEngine, MapReduceJob
from src.motif_search.errors import (
    ConfigurationError,
    RecordFormatError,
    StageExecutionError,
)
from src.motif_search.records import MotifMatch, decode_match, decode_total
from src.motif_search.stages import alignment_job, consensus_job, total_distance_job

logger = logging.getLogger(__name__)

DEFAULT_MOTIF_LENGTH = 8

TOTAL_DISTANCE_DIR = "total_hamming_distance"
CONSENSUS_DIR = "consensus_motif"


class PipelineState(Enum):
    NOT_STARTED = "not_started"
    STAGE1_RUNNING = "stage1_running"
    STAGE1_DONE = "stage1_done"
    STAGE2_RUNNING = "stage2_running"
    STAGE2_DONE = "stage2_done"
    STAGE3_RUNNING = "stage3_running"
    STAGE3_DONE = "stage3_done"
    FAILED = "failed"


@dataclass
class PipelineConfig:
    """Locations and parameters of one pipeline run."""

    input_path: str
    work_path: str
    output_path: str
    motif_length: int = DEFAULT_MOTIF_LENGTH
    num_reducers: int | None = None

    @property
    def total_distance_path(self) -> str:
        return f"{self.work_path.rstrip('/')}/{TOTAL_DISTANCE_DIR}"

    @property
    def consensus_path(self) -> str:
        return f"{self.work_path.rstrip('/')}/{CONSENSUS_DIR}"

    def validate(self) -> None:
        """
        Check the configuration before any stage runs.

        Raises:
            ConfigurationError: On empty paths, a missing local input,
                                a motif length < 1 or a reducer count < 1
        """
        for name in ("input_path", "work_path", "output_path"):
            if not getattr(self, name):
                raise ConfigurationError(f"{name} must not be empty")

        if not is_remote(self.input_path) and not local_path(self.input_path).exists():
            raise ConfigurationError(f"Input path does not exist: {self.input_path}")

        if isinstance(self.motif_length, bool) or not isinstance(self.motif_length, int):
            raise ConfigurationError(f"Motif length must be an integer, got {self.motif_length!r}")
        if self.motif_length < 1:
            raise ConfigurationError(f"Motif length must be >= 1, got {self.motif_length}")

        if self.num_reducers is not None and self.num_reducers < 1:
            raise ConfigurationError(f"Reducer count must be >= 1, got {self.num_reducers}")


class PipelineResult(NamedTuple):
    consensus_motif: str
    total_distance: int
    alignments: list[MotifMatch]


class MedianMotifPipeline:
    """Runs the three median string stages in order on one SparkContext."""

    def __init__(
        self,
        sc: SparkContext,
        config: PipelineConfig,
        store: TextRecordStore | None = None,
    ) -> None:
        self.config = config
        self.store = store or TextRecordStore(sc)
        self.engine = MapReduceEngine(sc, self.store)
        self.state = PipelineState.NOT_STARTED
        self.failed_stage: str | None = None

    def _run_stage(
        self,
        job: MapReduceJob,
        running: PipelineState,
        done: PipelineState,
    ) -> None:
        self.state = running
        try:
            self.engine.run(job)
        except StageExecutionError:
            self.state = PipelineState.FAILED
            self.failed_stage = job.name
            logger.error("Pipeline aborted: %s failed, later stages skipped", job.name)
            raise
        self.state = done

    def stage_jobs(self) -> list[tuple[MapReduceJob, PipelineState, PipelineState]]:
        """Stage jobs in execution order with their running and done states."""
        cfg = self.config
        return [
            (
                total_distance_job(
                    cfg.input_path, cfg.total_distance_path, cfg.motif_length, cfg.num_reducers
                ),
                PipelineState.STAGE1_RUNNING,
                PipelineState.STAGE1_DONE,
            ),
            (
                consensus_job(cfg.total_distance_path, cfg.consensus_path),
                PipelineState.STAGE2_RUNNING,
                PipelineState.STAGE2_DONE,
            ),
            (
                alignment_job(
                    cfg.input_path,
                    cfg.consensus_path,
                    cfg.output_path,
                    cfg.motif_length,
                    cfg.num_reducers,
                ),
                PipelineState.STAGE3_RUNNING,
                PipelineState.STAGE3_DONE,
            ),
        ]

    def run(self) -> PipelineResult:
        """
        Validate the configuration, run every stage and read back the result.

        Raises:
            ConfigurationError: If the configuration is invalid (no stage runs)
            StageExecutionError: If a stage fails (later stages do not run)
        """
        if self.state is not PipelineState.NOT_STARTED:
            raise ConfigurationError(f"Pipeline already ran (state: {self.state.value})")

        self.config.validate()
        logger.info(
            "Median string search: input=%s motif_length=%d",
            self.config.input_path,
            self.config.motif_length,
        )

        for job, running, done in self.stage_jobs():
            self._run_stage(job, running, done)

        try:
            result = self.read_result()
        except StageExecutionError as exc:
            self.state = PipelineState.FAILED
            self.failed_stage = exc.stage
            logger.error("Pipeline aborted: output of %s could not be read back", exc.stage)
            raise
        logger.info(
            "Consensus motif %s with total distance %d over %d sequences",
            result.consensus_motif,
            result.total_distance,
            len(result.alignments),
        )
        return result

    def read_result(self) -> PipelineResult:
        """
        Read the consensus and the final alignments back from the store.

        Raises:
            StageExecutionError: If a stage output is missing or malformed
        """
        consensus_lines = self.store.collect(self.config.consensus_path)
        if len(consensus_lines) != 1:
            raise StageExecutionError(
                "ConsensusStringSearchJob",
                f"Expected exactly one consensus motif, found {len(consensus_lines)}",
            )
        try:
            consensus = decode_total(consensus_lines[0])
        except RecordFormatError as exc:
            raise StageExecutionError("ConsensusStringSearchJob", str(exc)) from exc

        try:
            matches = [decode_match(line) for line in self.store.collect(self.config.output_path)]
        except RecordFormatError as exc:
            raise StageExecutionError("MedianMotifStringSearchJob", str(exc)) from exc

        alignments = sorted(matches, key=lambda match: match.sequence_id)
        return PipelineResult(consensus.motif, consensus.total_hamming_distance, alignments)
