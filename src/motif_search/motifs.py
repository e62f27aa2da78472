"""
Enumeration of every candidate motif of a given length.

The median string search is exhaustive: each of the 4^L strings over the
nucleotide alphabet is scored, so the enumeration must produce every
candidate exactly once and in a stable order.
"""

from itertools import product

from src.motif_search.errors import ConfigurationError

# Digit order of the base-4 enumeration: a=0, t=1, g=2, c=3
NUCLEOTIDES = "atgc"


def motif_count(length: int) -> int:
    return len(NUCLEOTIDES) ** length


def all_motifs(length: int) -> list[str]:
    """
    Generate all motifs of the given length.

    The order is base-4 counting from 0 to 4^length - 1, zero-padded, with
    each digit mapped through NUCLEOTIDES ("aaa", "aat", "aag", "aac", "ata", ...).

    Args:
        length: Motif length L (must be >= 1)

    Returns:
        List of 4^length distinct strings
    """
    if length < 1:
        raise ConfigurationError(f"Motif length must be >= 1, got {length}")

    # product() varies the last position fastest, matching base-4 counting
    return ["".join(letters) for letters in product(NUCLEOTIDES, repeat=length)]
