"""
Tests for src/motif_search/hamming.py.
"""

from src.motif_search.hamming import align_motif, best_alignment, hamming_distance


class TestHammingDistance:
    """Tests for the mismatch count."""

    def test_identical_strings(self) -> None:
        assert hamming_distance("acgt", "acgt") == 0

    def test_counts_mismatches(self) -> None:
        assert hamming_distance("aca", "acc") == 1
        assert hamming_distance("aaaa", "tttt") == 4

    def test_length_difference_counts_as_mismatch(self) -> None:
        assert hamming_distance("acg", "acgtt") == 2
        assert hamming_distance("tcgtt", "acg") == 3


class TestBestAlignment:
    """Tests for the sliding-window alignment."""

    def test_exact_match_offset(self) -> None:
        assert best_alignment("ggaccttt", "acc") == (0, 2)

    def test_inexact_match(self) -> None:
        # "aca" at offset 2 differs from "acc" in one position
        distance, index = best_alignment("atacaggc", "acc")
        assert distance == 1
        assert index == 2

    def test_ties_keep_lowest_offset(self) -> None:
        assert best_alignment("gatgat", "gat") == (0, 0)
        assert best_alignment("cccc", "aa") == (2, 0)

    def test_last_offset_is_considered(self) -> None:
        assert best_alignment("aaaacg", "acg") == (0, 3)

    def test_sequence_equal_to_motif(self) -> None:
        assert best_alignment("acgt", "acgt") == (0, 0)

    def test_sequence_shorter_than_motif(self) -> None:
        """A short sequence yields the sentinel instead of raising."""
        assert best_alignment("ac", "acg") == (4, -1)
        assert best_alignment("", "a") == (2, -1)

    def test_never_worse_than_offset_zero(self) -> None:
        sequences = ["ggaccttt", "atacaggc", "tttttttt", "gcgcgcat"]
        motifs = ["acc", "ttt", "gca", "cat"]
        for sequence in sequences:
            for motif in motifs:
                distance, index = best_alignment(sequence, motif)
                assert distance <= hamming_distance(motif, sequence[: len(motif)])
                assert 0 <= index <= len(sequence) - len(motif)


class TestAlignMotif:
    """Tests for the record-building wrapper."""

    def test_builds_alignment_record(self) -> None:
        match = align_motif(7, "ggaccttt", "acc")

        assert match.sequence_id == 7
        assert match.sequence == "ggaccttt"
        assert match.motif == "acc"
        assert match.min_hamming_distance == 0
        assert match.alignment_index == 2
        assert not match.is_consensus_marker
        assert match.total_hamming_distance == 0

    def test_unaligned_record(self) -> None:
        match = align_motif(0, "ac", "acg")

        assert not match.is_aligned
        assert match.min_hamming_distance == 4
