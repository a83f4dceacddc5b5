from __future__ import annotations

from dataclasses import dataclass

import numpy as np
from PIL import Image

# ITU-R BT.601 luma weights
LUMA_WEIGHTS = np.array([0.299, 0.587, 0.114], dtype=np.float64)


@dataclass(frozen=True, eq=False)
class PixelBuffer:
    """Immutable RGBA raster, shape ``(height, width, 4)``, channels 0-255."""
    pixels: np.ndarray

    def __post_init__(self) -> None:
        pixels = np.asarray(self.pixels)
        if pixels.ndim != 3 or pixels.shape[2] != 4:
            raise ValueError(f"Expected an (height, width, 4) array, got shape {pixels.shape}")
        if pixels.shape[0] < 1 or pixels.shape[1] < 1:
            raise ValueError(f"Pixel buffer must be at least 1x1, got {pixels.shape[1]}x{pixels.shape[0]}")
        pixels = np.array(pixels, dtype=np.uint8, copy=True)
        pixels.setflags(write=False)
        object.__setattr__(self, "pixels", pixels)

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])

    @property
    def rgb(self) -> np.ndarray:
        return self.pixels[..., :3]

    def luminance(self) -> np.ndarray:
        """Per-pixel gray level as float64, shape ``(height, width)``."""
        return self.rgb.astype(np.float64) @ LUMA_WEIGHTS

    @classmethod
    def from_image(cls, image: Image.Image) -> PixelBuffer:
        if image.mode != 'RGBA':
            image = image.convert('RGBA')
        return cls(np.asarray(image, dtype=np.uint8))

    @classmethod
    def from_array(cls, array: np.ndarray) -> PixelBuffer:
        """Build a buffer from an RGB or RGBA array; RGB gets an opaque alpha channel."""
        array = np.asarray(array, dtype=np.uint8)
        if array.ndim == 3 and array.shape[2] == 3:
            alpha = np.full(array.shape[:2] + (1,), 255, dtype=np.uint8)
            array = np.concatenate([array, alpha], axis=2)
        return cls(array)
