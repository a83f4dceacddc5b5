"""Perceptual hash computation for artwork near-duplicate detection."""

import math
from typing import Optional

import imagehash
import numpy as np
from PIL import Image

from ..config import HashSettings
from ..raster import PillowRasterizer, PixelBuffer, Rasterizer
from ..logging import get_logger

logger = get_logger(__name__)


def _cosine_basis(dct_size: int, grid_size: int) -> np.ndarray:
    """Rows are frequencies k, columns positions n: cos((2n+1) k pi / 2N)."""
    k = np.arange(dct_size, dtype=np.float64)[:, None]
    n = np.arange(grid_size, dtype=np.float64)[None, :]
    return np.cos((2 * n + 1) * k * math.pi / (2 * grid_size))


def dct_coefficients(gray: np.ndarray, dct_size: int = 8) -> np.ndarray:
    """
    Low-frequency DCT-II block of a square luminance grid.

    Args:
        gray: Square ``(N, N)`` luminance grid indexed ``[y, x]``
        dct_size: Number of frequencies kept along each axis

    Returns:
        ``dct_size * dct_size`` coefficients in row-major ``(u, v)`` order,
        where ``u`` is the horizontal and ``v`` the vertical frequency
    """
    grid_size = gray.shape[0]
    basis = _cosine_basis(dct_size, grid_size)
    # coeffs[u, v] = sum_x sum_y gray[y, x] * basis[u, x] * basis[v, y]
    coeffs = basis @ gray.T @ basis.T

    scale = np.ones(dct_size)
    scale[0] = 1 / math.sqrt(2)
    coeffs = coeffs * scale[:, None] * scale[None, :] / 4
    return coeffs.flatten()


def hash_from_coefficients(coeffs: np.ndarray) -> str:
    """
    Threshold DCT coefficients into a hex fingerprint.

    The threshold is taken from the sorted non-DC coefficients at index
    ``len(coeffs) // 2``, i.e. one past their true median for a 64-bit hash.
    Stored fingerprints depend on this choice.
    """
    threshold = np.sort(coeffs[1:])[len(coeffs) // 2]
    bits = coeffs > threshold
    return str(imagehash.ImageHash(bits.reshape(-1, math.isqrt(bits.size))))


def compute_hash(
    buffer: PixelBuffer,
    settings: Optional[HashSettings] = None,
    resample: Image.Resampling = Image.Resampling.BILINEAR,
) -> str:
    """
    Compute the 64-bit perceptual hash of a pixel buffer.

    Buffers that are not already ``grid_size`` square are resampled to it first.

    Args:
        buffer: Decoded RGBA pixels
        settings: Grid and DCT sizes
        resample: Pillow filter used when the buffer needs resampling

    Returns:
        16 lowercase hex characters, most significant bit first
    """
    settings = settings or HashSettings()
    size = settings.grid_size

    if buffer.width != size or buffer.height != size:
        buffer = _resample(buffer, size, resample)

    coeffs = dct_coefficients(buffer.luminance(), settings.dct_size)
    phash = hash_from_coefficients(coeffs)
    logger.debug(f"Computed perceptual hash {phash}")
    return phash


def hash_image(
    data: bytes,
    rasterizer: Optional[Rasterizer] = None,
    settings: Optional[HashSettings] = None,
) -> str:
    """
    Decode image bytes at the hash grid size and hash them.

    Raises:
        DecodeError: If the bytes cannot be decoded
        RenderError: If the image cannot be drawn at the grid size
    """
    settings = settings or HashSettings()
    rasterizer = rasterizer or PillowRasterizer()
    buffer = rasterizer.decode(data, settings.grid_size, settings.grid_size)
    return compute_hash(buffer, settings, getattr(rasterizer, 'resample', Image.Resampling.BILINEAR))


def _resample(buffer: PixelBuffer, size: int, resample: Image.Resampling) -> PixelBuffer:
    img = Image.fromarray(np.ascontiguousarray(buffer.pixels))
    return PixelBuffer.from_image(img.resize((size, size), resample))
