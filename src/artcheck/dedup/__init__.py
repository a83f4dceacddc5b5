"""Perceptual hashing and near-duplicate matching for artwork uploads."""

from .model import ArtworkRecord, MatchLevel, MatchResult
from .hash import compute_hash, hash_image
from .distance import INCOMPARABLE, hamming_distance, is_valid_hash
from .search import classify_match, find_similar_artwork, match_confidence

__all__ = [
    "ArtworkRecord",
    "MatchLevel",
    "MatchResult",
    "compute_hash",
    "hash_image",
    "INCOMPARABLE",
    "hamming_distance",
    "is_valid_hash",
    "classify_match",
    "find_similar_artwork",
    "match_confidence",
]
