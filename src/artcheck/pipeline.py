"""Public API for analyzing a single artwork upload."""

from dataclasses import dataclass
from typing import Iterable, Optional

import numpy as np

from .config import Settings
from .dedup.hash import hash_image
from .dedup.model import ArtworkRecord, MatchResult
from .dedup.search import find_similar_artwork
from .features.extract import FeatureVector, analyze_image_features
from .raster import PillowRasterizer, Rasterizer
from .screenshot.heuristics import ScreenshotVerdict, analyze_screenshot
from .logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class UploadReport:
    """Everything the integrity checks found out about one upload."""
    perceptual_hash: str
    match: Optional[MatchResult]
    screenshot: ScreenshotVerdict
    features: Optional[FeatureVector] = None


def analyze_upload(
    data: bytes,
    corpus: Iterable[ArtworkRecord],
    rasterizer: Optional[Rasterizer] = None,
    settings: Optional[Settings] = None,
    rng: Optional[np.random.Generator] = None,
    include_features: bool = False,
) -> UploadReport:
    """
    Fingerprint an upload, look for near-duplicates and score originality.

    Args:
        data: Raw image bytes
        corpus: Snapshot of stored artworks to match against
        rasterizer: Image decoder, Pillow by default
        settings: Thresholds for every check
        rng: Random source for screenshot block sampling
        include_features: Also extract color/edge/texture features

    Returns:
        UploadReport for the upload

    Raises:
        DecodeError: If the image cannot be decoded for hashing
        RenderError: If the image cannot be rendered for hashing
    """
    settings = settings or Settings()
    rasterizer = rasterizer or PillowRasterizer()

    perceptual_hash = hash_image(data, rasterizer, settings.hashing)
    match = find_similar_artwork(perceptual_hash, corpus, settings.matching)
    screenshot = analyze_screenshot(data, rasterizer, settings.screenshot, rng)

    features = None
    if include_features:
        features = analyze_image_features(data, rasterizer, settings.features)

    if match is not None:
        logger.info(f"Upload {perceptual_hash} resembles artwork {match.artwork.id} (confidence {match.confidence:.2f})")
    if screenshot.is_screenshot:
        logger.info(f"Upload {perceptual_hash} looks like a screenshot: {screenshot.reason}")

    return UploadReport(
        perceptual_hash=perceptual_hash,
        match=match,
        screenshot=screenshot,
        features=features,
    )
