"""
Heuristic screenshot detection for originality scoring.

Each signal looks at one property typical of screen captures (screen-sized
dimensions, a UI-like palette, crisp text edges, flat compressed blocks) and
adds its weight to a running score when it fires. The result is advisory:
decoding or analysis failures yield a negative verdict instead of an error.
"""

from dataclasses import dataclass
from typing import List, Optional, Tuple

import numpy as np

from ..config import ScreenshotSettings
from ..raster import DecodeError, PillowRasterizer, PixelBuffer, Rasterizer, RenderError
from ..logging import get_logger

logger = get_logger(__name__)

UNKNOWN_REASON = "Unknown"
UNABLE_TO_LOAD = "Unable to load image"
UNABLE_TO_ANALYZE = "Unable to analyze"
ANALYSIS_ERROR = "Error in analysis"


@dataclass(frozen=True)
class ScreenshotVerdict:
    is_screenshot: bool
    confidence: float
    reasons: Tuple[str, ...] = ()

    @property
    def reason(self) -> str:
        return "; ".join(self.reasons) if self.reasons else UNKNOWN_REASON

    @classmethod
    def failed(cls, reason: str) -> "ScreenshotVerdict":
        return cls(is_screenshot=False, confidence=0.0, reasons=(reason,))


def matches_screen_resolution(width: int, height: int, settings: ScreenshotSettings) -> bool:
    """True if the dimensions, in either orientation, are a known screen resolution."""
    return any(
        (width, height) == (w, h) or (width, height) == (h, w)
        for w, h in settings.resolutions
    )


def matching_aspect_ratio(width: int, height: int, settings: ScreenshotSettings) -> Optional[str]:
    """Name of the first common screen aspect ratio the dimensions fall within, if any."""
    if width <= 0 or height <= 0:
        return None
    aspect_ratio = width / height
    for name, ratio in settings.aspect_ratios:
        if abs(aspect_ratio - ratio) < settings.aspect_tolerance:
            return name
    return None


def color_diversity(buffer: PixelBuffer) -> float:
    """Number of distinct RGB triples per pixel."""
    rgb = buffer.rgb.reshape(-1, 3).astype(np.uint32)
    packed = (rgb[:, 0] << 16) | (rgb[:, 1] << 8) | rgb[:, 2]
    return np.unique(packed).size / packed.size


def edge_statistics(gray: np.ndarray, settings: ScreenshotSettings) -> Tuple[float, float]:
    """
    Sample right/down luminance steps on a sparse grid.

    Returns:
        (mean edge strength, fraction of samples stronger than
        ``sharp_pixel_strength``); both 0 when the image is too small to sample
    """
    height, width = gray.shape
    ys = np.arange(1, height - 1, settings.edge_stride)
    xs = np.arange(1, width - 1, settings.edge_stride)
    if ys.size == 0 or xs.size == 0:
        return 0.0, 0.0

    center = gray[np.ix_(ys, xs)]
    right = gray[np.ix_(ys, xs + 1)]
    below = gray[np.ix_(ys + 1, xs)]
    strength = np.abs(center - right) + np.abs(center - below)

    return float(strength.mean()), float((strength > settings.sharp_pixel_strength).mean())


def blockiness(
    gray: np.ndarray,
    settings: ScreenshotSettings,
    rng: np.random.Generator,
) -> Optional[float]:
    """
    Fraction of randomly placed blocks that are nearly flat.

    Returns None when the image is smaller than the sampling margin and no
    block can be placed.
    """
    height, width = gray.shape
    margin = settings.block_margin
    if width < margin or height < margin:
        return None

    size = settings.block_size
    flat_blocks = 0
    for _ in range(settings.block_samples):
        x = int(rng.random() * (width - margin))
        y = int(rng.random() * (height - margin))
        block = gray[y:y + size, x:x + size]
        if block.var() < settings.block_variance_threshold:
            flat_blocks += 1

    return flat_blocks / settings.block_samples


def detect_screenshot(
    buffer: PixelBuffer,
    width: Optional[int] = None,
    height: Optional[int] = None,
    settings: Optional[ScreenshotSettings] = None,
    rng: Optional[np.random.Generator] = None,
) -> ScreenshotVerdict:
    """
    Score a decoded image for screenshot-like properties.

    Args:
        buffer: Image at its natural size
        width: Reported image width, defaults to the buffer width
        height: Reported image height, defaults to the buffer height
        settings: Signal thresholds and weights
        rng: Random source for block sampling; pass a seeded generator
            for reproducible results

    Returns:
        ScreenshotVerdict with the triggered reasons in signal order
    """
    settings = settings or ScreenshotSettings()
    rng = rng if rng is not None else np.random.default_rng()
    width = buffer.width if width is None else width
    height = buffer.height if height is None else height

    score = 0.0
    reasons: List[str] = []

    if matches_screen_resolution(width, height, settings):
        score += settings.resolution_weight
        reasons.append(f"Exact screen resolution: {width}x{height}")

    ratio_name = matching_aspect_ratio(width, height, settings)
    if ratio_name is not None:
        score += settings.aspect_weight
        reasons.append(f"Standard {ratio_name} aspect ratio")

    diversity = color_diversity(buffer)
    if diversity < settings.low_diversity_ratio:
        score += settings.low_diversity_weight
        reasons.append(f"Extremely low color diversity: only {diversity:.0%} unique colors")
    elif diversity < settings.limited_palette_ratio:
        score += settings.limited_palette_weight
        reasons.append("Limited color palette detected")

    gray = buffer.luminance()
    avg_edge_strength, sharp_ratio = edge_statistics(gray, settings)
    if avg_edge_strength > settings.crisp_edge_threshold:
        score += settings.crisp_edge_weight
        reasons.append("Unusually crisp edges (text/UI-like)")
    if sharp_ratio > settings.sharp_pixel_ratio:
        score += settings.sharp_pixel_weight
        reasons.append("High number of sharp transitions")

    blockiness_ratio = blockiness(gray, settings, rng)
    if blockiness_ratio is not None and blockiness_ratio > settings.blockiness_ratio:
        score += settings.blockiness_weight
        reasons.append("JPEG compression blockiness detected")

    # Weights are decimal fractions; compare the score they add up to, not float residue
    score = round(score, 6)

    logger.debug(
        f"Screenshot signals for {width}x{height}: diversity={diversity:.4f}, "
        f"edges={avg_edge_strength:.2f}, sharp={sharp_ratio:.4f}, "
        f"blockiness={blockiness_ratio}, score={score:.2f}"
    )

    return ScreenshotVerdict(
        is_screenshot=score > settings.decision_threshold,
        confidence=min(1.0, score),
        reasons=tuple(reasons),
    )


def analyze_screenshot(
    data: bytes,
    rasterizer: Optional[Rasterizer] = None,
    settings: Optional[ScreenshotSettings] = None,
    rng: Optional[np.random.Generator] = None,
) -> ScreenshotVerdict:
    """
    Decode image bytes and score them for screenshot-like properties.

    Never raises: a failure to decode or analyze the image yields a negative
    verdict with zero confidence and the failure as its reason.
    """
    rasterizer = rasterizer or PillowRasterizer()

    try:
        buffer = rasterizer.decode(data)
    except DecodeError as exc:
        logger.warning(f"Screenshot detection skipped, image could not be decoded: {exc}")
        return ScreenshotVerdict.failed(UNABLE_TO_LOAD)
    except RenderError as exc:
        logger.warning(f"Screenshot detection skipped, image could not be rendered: {exc}")
        return ScreenshotVerdict.failed(UNABLE_TO_ANALYZE)

    try:
        return detect_screenshot(buffer, settings=settings, rng=rng)
    except Exception as exc:
        logger.warning(f"Screenshot detection failed: {exc}")
        return ScreenshotVerdict.failed(ANALYSIS_ERROR)
