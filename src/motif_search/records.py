"""
MotifMatch record model and its line codec.

MotifMatch is the value threaded through every map and reduce step of the
pipeline. Records are immutable; stages derive new records with
``_replace`` instead of mutating them.

Two line formats are used in the record store:

    MM1<TAB>motif<TAB>sequence_id<TAB>sequence<TAB>min_hd<TAB>index<TAB>marker<TAB>total
        Full record, produced by the final stage. The leading tag carries
        the format version.

    motif<TAB>total
        Per-motif totals exchanged between stage 1, stage 2 and stage 3.
"""

from typing import NamedTuple

from src.motif_search.errors import RecordFormatError

# Alignment index meaning "the sequence is shorter than the motif"
NO_ALIGNMENT = -1

RECORD_TAG = "MM1"
FIELD_SEPARATOR = "\t"

_MATCH_FIELD_COUNT = 8
_TOTAL_FIELD_COUNT = 2


class MotifMatch(NamedTuple):
    """A motif together with its best alignment against one sequence."""

    sequence_id: int
    sequence: str
    motif: str
    min_hamming_distance: int
    alignment_index: int
    is_consensus_marker: bool = False
    total_hamming_distance: int = 0

    @classmethod
    def aggregate(cls, motif: str, total: int) -> "MotifMatch":
        """Per-motif record carrying the distance summed over all sequences."""
        return cls(0, "", motif, 0, NO_ALIGNMENT, False, total)

    @classmethod
    def consensus_marker(cls, motif: str, total: int) -> "MotifMatch":
        """Synthetic record transporting the winning motif into stage 3."""
        return cls(0, "", motif, 0, NO_ALIGNMENT, True, total)

    @property
    def is_aligned(self) -> bool:
        return self.alignment_index != NO_ALIGNMENT

    def with_total(self, total: int) -> "MotifMatch":
        return self._replace(total_hamming_distance=total)

    def aligned_substring(self) -> str:
        """Return the window of the sequence matched by the motif."""
        if not self.is_aligned:
            return ""
        start = self.alignment_index
        return self.sequence[start : start + len(self.motif)]


# ---------------------------------------------------------------------------
# Full record codec
# ---------------------------------------------------------------------------


def encode_match(match: MotifMatch) -> str:
    """Encode a MotifMatch as a versioned, tab-separated line."""
    return FIELD_SEPARATOR.join(
        [
            RECORD_TAG,
            match.motif,
            str(match.sequence_id),
            match.sequence,
            str(match.min_hamming_distance),
            str(match.alignment_index),
            "1" if match.is_consensus_marker else "0",
            str(match.total_hamming_distance),
        ]
    )


def decode_match(line: str) -> MotifMatch:
    """
    Decode a line written by encode_match.

    Raises:
        RecordFormatError: If the tag, field count or a numeric field is invalid
    """
    fields = line.rstrip("\r\n").split(FIELD_SEPARATOR)
    if fields[0] != RECORD_TAG:
        raise RecordFormatError(f"Unsupported record tag {fields[0]!r} in {line!r}")
    if len(fields) != _MATCH_FIELD_COUNT:
        raise RecordFormatError(
            f"Expected {_MATCH_FIELD_COUNT} fields, got {len(fields)} in {line!r}"
        )

    _, motif, sequence_id, sequence, min_hd, index, marker, total = fields
    if marker not in ("0", "1"):
        raise RecordFormatError(f"Invalid consensus marker flag {marker!r}")

    try:
        return MotifMatch(
            sequence_id=int(sequence_id),
            sequence=sequence,
            motif=motif,
            min_hamming_distance=int(min_hd),
            alignment_index=int(index),
            is_consensus_marker=marker == "1",
            total_hamming_distance=int(total),
        )
    except ValueError as exc:
        raise RecordFormatError(f"Invalid numeric field in {line!r}") from exc


# ---------------------------------------------------------------------------
# Per-motif total codec
# ---------------------------------------------------------------------------


def encode_total(match: MotifMatch) -> str:
    return f"{match.motif}{FIELD_SEPARATOR}{match.total_hamming_distance}"


def decode_total(line: str) -> MotifMatch:
    """Decode a ``motif<TAB>total`` line into an aggregate record."""
    fields = line.rstrip("\r\n").split(FIELD_SEPARATOR)
    if len(fields) != _TOTAL_FIELD_COUNT:
        raise RecordFormatError(f"Expected 'motif<TAB>total', got {line!r}")

    motif, total = fields
    try:
        return MotifMatch.aggregate(motif, int(total))
    except ValueError as exc:
        raise RecordFormatError(f"Invalid total distance in {line!r}") from exc


def format_alignment(match: MotifMatch) -> str:
    """Human-readable line: motif, matched window, id, distance, index, total."""
    return FIELD_SEPARATOR.join(
        [
            match.motif,
            match.aligned_substring() or "-",
            str(match.sequence_id),
            str(match.min_hamming_distance),
            str(match.alignment_index),
            str(match.total_hamming_distance),
        ]
    )
