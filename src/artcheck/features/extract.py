"""
Content features used for a second-opinion similarity check.

Three groups are computed from a fixed-size buffer: a per-channel color
histogram, a histogram of Sobel edge magnitudes, and global luminance
texture statistics.
"""

from dataclasses import dataclass
from typing import Optional, Tuple

import cv2
import numpy as np

from ..config import FeatureSettings
from ..raster import PillowRasterizer, PixelBuffer, Rasterizer
from ..logging import get_logger

logger = get_logger(__name__)

@dataclass(frozen=True)
class FeatureVector:
    """Normalized feature groups of one image."""
    color_histogram: Tuple[float, ...]   # 16 bins x R, G, B
    edge_histogram: Tuple[float, ...]    # 10 bins
    texture_features: Tuple[float, ...]  # mean, stddev of luminance / 255


def color_histogram(buffer: PixelBuffer, bins: int = 16) -> np.ndarray:
    """Concatenated R, G, B histograms of ``bins`` equal-width bins, normalized by pixel count."""
    rgb = buffer.rgb.reshape(-1, 3)
    bin_width = 256 // bins
    indices = rgb // bin_width
    histogram = np.concatenate([
        np.bincount(indices[:, channel], minlength=bins)[:bins]
        for channel in range(3)
    ]).astype(np.float64)
    return histogram / rgb.shape[0]


def sobel_magnitudes(gray: np.ndarray) -> np.ndarray:
    """Sobel gradient magnitude at every interior pixel of a luminance grid."""
    height, width = gray.shape
    if height < 3 or width < 3:
        return np.empty(0, dtype=np.float64)

    gray = np.ascontiguousarray(gray, dtype=np.float64)
    # Border pixels are excluded; only full 3x3 neighbourhoods count
    gx = cv2.Sobel(gray, cv2.CV_64F, 1, 0, ksize=3)[1:-1, 1:-1]
    gy = cv2.Sobel(gray, cv2.CV_64F, 0, 1, ksize=3)[1:-1, 1:-1]

    return np.sqrt(gx * gx + gy * gy).ravel()


def edge_histogram(gray: np.ndarray, bins: int = 10) -> np.ndarray:
    """
    Histogram of Sobel magnitudes scaled by the image's own strongest edge.

    A flat image has no edges at all; all of its samples land in the first bin.
    """
    edges = sobel_magnitudes(gray)
    histogram = np.zeros(bins, dtype=np.float64)
    if edges.size == 0:
        logger.debug("Buffer too small for Sobel sampling, edge histogram left empty")
        return histogram

    max_edge = edges.max()
    if max_edge > 0:
        indices = np.minimum(bins - 1, np.floor(edges / max_edge * bins)).astype(np.intp)
    else:
        indices = np.zeros(edges.size, dtype=np.intp)

    histogram += np.bincount(indices, minlength=bins)
    return histogram / edges.size


def texture_features(gray: np.ndarray) -> np.ndarray:
    """Mean and population standard deviation of luminance, both divided by 255."""
    return np.array([gray.mean() / 255, gray.std() / 255], dtype=np.float64)


def extract_features(buffer: PixelBuffer, settings: Optional[FeatureSettings] = None) -> FeatureVector:
    """
    Extract the color, edge and texture feature groups of a buffer.

    Callers are expected to pass a ``settings.size`` square buffer, as
    produced by :func:`analyze_image_features`, so that vectors of different
    uploads are comparable.
    """
    settings = settings or FeatureSettings()
    if buffer.width != settings.size or buffer.height != settings.size:
        logger.debug(
            f"Extracting features from a {buffer.width}x{buffer.height} buffer "
            f"(expected {settings.size}x{settings.size})"
        )

    gray = buffer.luminance()
    features = FeatureVector(
        color_histogram=tuple(color_histogram(buffer, settings.color_bins).tolist()),
        edge_histogram=tuple(edge_histogram(gray, settings.edge_bins).tolist()),
        texture_features=tuple(texture_features(gray).tolist()),
    )
    logger.debug(f"Extracted features: texture={features.texture_features}")
    return features


def analyze_image_features(
    data: bytes,
    rasterizer: Optional[Rasterizer] = None,
    settings: Optional[FeatureSettings] = None,
) -> FeatureVector:
    """
    Decode image bytes at the feature size and extract their features.

    Raises:
        DecodeError: If the bytes cannot be decoded
        RenderError: If the image cannot be drawn at the feature size
    """
    settings = settings or FeatureSettings()
    rasterizer = rasterizer or PillowRasterizer()
    buffer = rasterizer.decode(data, settings.size, settings.size)
    return extract_features(buffer, settings)
