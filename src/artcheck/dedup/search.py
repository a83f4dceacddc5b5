"""Nearest-neighbour search of a perceptual hash over an artwork corpus."""

from typing import Iterable, Optional

from ..config import MatchSettings
from ..logging import get_logger
from .distance import hamming_distance, is_valid_hash
from .model import ArtworkRecord, MatchLevel, MatchResult

logger = get_logger(__name__)


def match_confidence(distance: float, hash_bits: int = 64) -> float:
    """Map a Hamming distance to a similarity in [0, 1]."""
    similarity = 1 - (distance / hash_bits)
    return max(0.0, min(1.0, similarity))


def find_similar_artwork(
    query_hash: str,
    corpus: Iterable[ArtworkRecord],
    settings: Optional[MatchSettings] = None,
) -> Optional[MatchResult]:
    """
    Find the corpus artwork closest to a query hash.

    The corpus is read once, in order. Records without a stored hash are
    skipped. Only records within ``moderate_threshold`` bits are admitted;
    among those the smallest distance wins, and on a tie the record seen
    first is kept.

    Args:
        query_hash: Hash of the uploaded image
        corpus: Snapshot of stored artworks
        settings: Match thresholds

    Returns:
        The closest admitted match, or None
    """
    settings = settings or MatchSettings()
    closest: Optional[MatchResult] = None

    for artwork in corpus:
        if not artwork.perceptual_hash:
            continue

        if not is_valid_hash(artwork.perceptual_hash, settings.hash_bits):
            logger.warning(f"Artwork {artwork.id} has a malformed hash {artwork.perceptual_hash!r}, skipping")
            continue

        distance = hamming_distance(query_hash, artwork.perceptual_hash, settings.hash_bits)
        if distance > settings.moderate_threshold:
            continue

        logger.debug(f"Artwork {artwork.id} within threshold (distance: {distance})")
        if closest is None or distance < closest.distance:
            closest = MatchResult(
                artwork=artwork,
                distance=int(distance),
                confidence=match_confidence(distance, settings.hash_bits),
            )

    if closest is not None:
        logger.info(f"Closest match for {query_hash}: {closest.artwork.id} (distance: {closest.distance})")
    return closest


def classify_match(match: MatchResult, settings: Optional[MatchSettings] = None) -> MatchLevel:
    """Label a match as an exact duplicate or merely similar."""
    settings = settings or MatchSettings()
    if match.distance <= settings.strict_threshold:
        return MatchLevel.EXACT
    return MatchLevel.SIMILAR
