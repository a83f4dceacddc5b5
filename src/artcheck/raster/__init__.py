"""Decoding of uploaded image bytes into RGBA pixel buffers."""

from .buffer import PixelBuffer
from .decode import DecodeError, PillowRasterizer, RasterError, Rasterizer, RenderError

__all__ = [
    "PixelBuffer",
    "Rasterizer",
    "PillowRasterizer",
    "RasterError",
    "DecodeError",
    "RenderError",
]
