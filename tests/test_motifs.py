"""
Tests for src/motif_search/motifs.py.
"""

import pytest

from src.motif_search.errors import ConfigurationError
from src.motif_search.motifs import NUCLEOTIDES, all_motifs, motif_count


class TestAllMotifs:
    """Tests for exhaustive motif enumeration."""

    @pytest.mark.parametrize("length", [1, 2, 3, 5])
    def test_count_and_uniqueness(self, length: int) -> None:
        motifs = all_motifs(length)

        assert len(motifs) == 4**length == motif_count(length)
        assert len(set(motifs)) == len(motifs)
        assert all(len(motif) == length for motif in motifs)
        assert all(set(motif) <= set(NUCLEOTIDES) for motif in motifs)

    def test_base4_order(self) -> None:
        motifs = all_motifs(2)

        assert motifs[:5] == ["aa", "at", "ag", "ac", "ta"]
        assert motifs[-1] == "cc"

    def test_matches_base4_numbering(self) -> None:
        """Index i is i written in base 4 with digits a=0, t=1, g=2, c=3."""
        motifs = all_motifs(3)

        for i in (0, 1, 7, 27, 63):
            digits = [(i // 4**p) % 4 for p in (2, 1, 0)]
            assert motifs[i] == "".join(NUCLEOTIDES[d] for d in digits)

    def test_deterministic(self) -> None:
        assert all_motifs(4) == all_motifs(4)

    @pytest.mark.parametrize("length", [0, -1])
    def test_rejects_non_positive_length(self, length: int) -> None:
        with pytest.raises(ConfigurationError):
            all_motifs(length)
