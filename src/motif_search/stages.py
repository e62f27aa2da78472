"""
The three stages of the median string search.

Stage 1 - total distance:  (motif, alignment) per sequence x motif,
                           summed per motif
Stage 2 - consensus:       single serial reducer folding every motif total
                           into the global minimum
Stage 3 - re-alignment:    sequences and the stage-2 marker keyed by motif;
                           only the consensus motif's group survives
"""

from collections.abc import Iterable, Iterator

from src.motif_search.engine import InputSource, MapFunction, MapReduceJob, Reducer
from src.motif_search.hamming import align_motif
from src.motif_search.motifs import all_motifs
from src.motif_search.records import (
    MotifMatch,
    decode_total,
    encode_match,
    encode_total,
)

SEQUENCE_ORIGIN = "sequence"
CONSENSUS_ORIGIN = "consensus"
TOTALS_ORIGIN = "totals"


# ---------------------------------------------------------------------------
# Map functions
# ---------------------------------------------------------------------------


def motif_alignment_mapper(motif_length: int) -> MapFunction:
    """Return a map function aligning every motif of motif_length to a sequence.

    The motif list is built once on the driver and shipped with the closure,
    so every map task scores the same candidates.
    """
    motifs = all_motifs(motif_length)

    def _map(record_id: int, line: str) -> Iterator[tuple[str, MotifMatch]]:
        sequence = line.strip().lower()
        if not sequence:
            return
        for motif in motifs:
            yield motif, align_motif(record_id, sequence, motif)

    return _map


def total_distance_mapper(record_id: int, line: str) -> list[tuple[str, MotifMatch]]:
    """Re-key a ``motif<TAB>total`` line by its motif."""
    match = decode_total(line)
    return [(match.motif, match)]


def consensus_marker_mapper(record_id: int, line: str) -> list[tuple[str, MotifMatch]]:
    """Turn the stage-2 output line into a consensus marker keyed by motif."""
    match = decode_total(line)
    return [(match.motif, MotifMatch.consensus_marker(match.motif, match.total_hamming_distance))]


# ---------------------------------------------------------------------------
# Reducers
# ---------------------------------------------------------------------------


class TotalDistanceReducer(Reducer):
    """Sum the per-sequence minimum distances of one motif.

    Sequences shorter than the motif carry no alignment and do not
    contribute to the total.
    """

    def reduce(self, key: str, values: Iterator[MotifMatch]) -> Iterable[MotifMatch]:
        total = sum(value.min_hamming_distance for value in values if value.is_aligned)
        return [MotifMatch.aggregate(key, total)]


class ConsensusAccumulator:
    """
    Running minimum over per-motif totals.

    Ties on the total are resolved in favour of the lexicographically
    smallest motif, so the winner does not depend on the order in which
    groups reach the reducer.
    """

    def __init__(self) -> None:
        self.best: MotifMatch | None = None
        self.seen = 0

    def update(self, candidate: MotifMatch) -> None:
        self.seen += 1
        if self.best is None or (
            (candidate.total_hamming_distance, candidate.motif)
            < (self.best.total_hamming_distance, self.best.motif)
        ):
            self.best = candidate

    def finalize(self) -> MotifMatch:
        """Return the winning motif as a consensus marker.

        Raises:
            ValueError: If no candidate was ever seen
        """
        if self.best is None:
            raise ValueError("No motif totals to select a consensus from")
        return MotifMatch.consensus_marker(self.best.motif, self.best.total_hamming_distance)


class ConsensusReducer(Reducer):
    """Single serial reducer that keeps only the global minimum motif."""

    def __init__(self) -> None:
        self.accumulator = ConsensusAccumulator()

    def reduce(self, key: str, values: Iterator[MotifMatch]) -> Iterable[MotifMatch]:
        # One aggregate per motif is expected from stage 1
        for value in values:
            self.accumulator.update(value)
        return ()

    def finalize(self) -> Iterable[MotifMatch]:
        return [self.accumulator.finalize()]


class FilterConsensusReducer(Reducer):
    """Emit the per-sequence alignments of the consensus motif only."""

    def reduce(self, key: str, values: Iterator[MotifMatch]) -> Iterable[MotifMatch]:
        marker: MotifMatch | None = None
        alignments: list[MotifMatch] = []
        for value in values:
            if value.is_consensus_marker:
                marker = value
            else:
                alignments.append(value)

        if marker is None:
            return ()
        return [match.with_total(marker.total_hamming_distance) for match in alignments]


# ---------------------------------------------------------------------------
# Job builders
# ---------------------------------------------------------------------------


def total_distance_job(
    input_path: str, output_path: str, motif_length: int, num_reducers: int | None = None
) -> MapReduceJob:
    return MapReduceJob(
        name="TotalHammingDistanceJob",
        inputs=[InputSource(SEQUENCE_ORIGIN, input_path, motif_alignment_mapper(motif_length))],
        reducer_factory=TotalDistanceReducer,
        output_location=output_path,
        encode=encode_total,
        num_reducers=num_reducers,
    )


def consensus_job(input_path: str, output_path: str) -> MapReduceJob:
    # The running minimum cannot be split across reducers
    return MapReduceJob(
        name="ConsensusStringSearchJob",
        inputs=[InputSource(TOTALS_ORIGIN, input_path, total_distance_mapper)],
        reducer_factory=ConsensusReducer,
        output_location=output_path,
        encode=encode_total,
        num_reducers=1,
    )


def alignment_job(
    input_path: str,
    consensus_path: str,
    output_path: str,
    motif_length: int,
    num_reducers: int | None = None,
) -> MapReduceJob:
    return MapReduceJob(
        name="MedianMotifStringSearchJob",
        inputs=[
            InputSource(SEQUENCE_ORIGIN, input_path, motif_alignment_mapper(motif_length)),
            InputSource(CONSENSUS_ORIGIN, consensus_path, consensus_marker_mapper),
        ],
        reducer_factory=FilterConsensusReducer,
        output_location=output_path,
        encode=encode_match,
        num_reducers=num_reducers,
    )
