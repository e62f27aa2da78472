"""
Hamming distance alignment of a motif against a longer DNA sequence.

A motif is aligned by sliding a window of the motif's length over every
valid offset of the sequence and keeping the offset with the fewest
mismatches. Sequences shorter than the motif have no valid window; they
yield a sentinel instead of raising so one short read never aborts a run.
"""

from src.motif_search.records import NO_ALIGNMENT, MotifMatch


def hamming_distance(first: str, second: str) -> int:
    """Count mismatched positions; any excess length counts as mismatches."""
    distance = abs(len(first) - len(second))
    for a, b in zip(first, second):
        if a != b:
            distance += 1
    return distance


def best_alignment(sequence: str, motif: str) -> tuple[int, int]:
    """
    Find the minimum Hamming distance of motif against sequence.

    Args:
        sequence: The DNA sequence to search
        motif: The candidate motif

    Returns:
        (min_distance, index) where index is the first offset achieving the
        minimum. Returns (len(motif) + 1, -1) when the sequence is shorter
        than the motif.
    """
    k = len(motif)
    min_distance = k + 1
    index = NO_ALIGNMENT

    for offset in range(len(sequence) - k + 1):
        distance = hamming_distance(motif, sequence[offset : offset + k])
        if distance < min_distance:
            min_distance = distance
            index = offset
            if distance == 0:
                break

    return min_distance, index


def align_motif(sequence_id: int, sequence: str, motif: str) -> MotifMatch:
    """Build the per-sequence alignment record for one motif."""
    min_distance, index = best_alignment(sequence, motif)
    return MotifMatch(
        sequence_id=sequence_id,
        sequence=sequence,
        motif=motif,
        min_hamming_distance=min_distance,
        alignment_index=index,
    )
