"""Distance metrics for perceptual hash comparison."""

import math
import string
from typing import Union

import imagehash

# Returned when two hashes cannot be compared (wrong length or not hex)
INCOMPARABLE = math.inf

_HEX_DIGITS = frozenset(string.hexdigits)


def _is_square_width(hash_bits: int) -> bool:
    """Hex hashes decode into square bit grids, so only square widths are comparable."""
    side = math.isqrt(max(hash_bits, 0))
    return hash_bits > 0 and hash_bits % 4 == 0 and side * side == hash_bits


def is_valid_hash(value: object, hash_bits: int = 64) -> bool:
    """Return True if value is a hex string encoding exactly ``hash_bits`` bits."""
    if not _is_square_width(hash_bits):
        return False
    if not isinstance(value, str) or len(value) * 4 != hash_bits:
        return False
    return all(ch in _HEX_DIGITS for ch in value)


def hamming_distance(a: str, b: str, hash_bits: int = 64) -> Union[int, float]:
    """
    Calculate Hamming distance between two hex-encoded perceptual hashes.

    Args:
        a: First hash
        b: Second hash
        hash_bits: Expected hash width

    Returns:
        Number of differing bits, or ``INCOMPARABLE`` if either hash is
        malformed or the lengths differ
    """
    if not (is_valid_hash(a, hash_bits) and is_valid_hash(b, hash_bits)):
        return INCOMPARABLE
    return int(imagehash.hex_to_hash(a.lower()) - imagehash.hex_to_hash(b.lower()))
