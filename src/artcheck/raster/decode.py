from __future__ import annotations

import io
from typing import Optional, Protocol

from PIL import Image, ImageOps

from .buffer import PixelBuffer
from ..logging import get_logger

logger = get_logger(__name__)


class RasterError(Exception):
    """Raised when image bytes cannot be turned into a pixel buffer."""


class DecodeError(RasterError):
    """Raised when image bytes are unsupported or corrupt."""


class RenderError(RasterError):
    """Raised when a decoded image cannot be drawn to an RGBA surface."""


class Rasterizer(Protocol):
    def decode(
        self,
        data: bytes,
        width: Optional[int] = None,
        height: Optional[int] = None,
    ) -> PixelBuffer:
        ...


class PillowRasterizer:
    """Rasterizer backed by Pillow.

    The whole frame is scaled to the requested size (no cropping). When only
    one dimension is requested the other keeps its natural size.
    """

    def __init__(self, resample: Image.Resampling = Image.Resampling.BILINEAR) -> None:
        self.resample = resample

    def decode(
        self,
        data: bytes,
        width: Optional[int] = None,
        height: Optional[int] = None,
    ) -> PixelBuffer:
        try:
            with Image.open(io.BytesIO(data)) as img:
                img.load()
                # Camera uploads store rotation in EXIF; hash the upright frame
                rgba = ImageOps.exif_transpose(img).convert('RGBA')
        except Exception as exc:
            raise DecodeError(f"Failed to load image: {exc}") from exc

        if width is None and height is None:
            target = rgba.size
        else:
            target = (
                rgba.width if width is None else width,
                rgba.height if height is None else height,
            )

        if target[0] < 1 or target[1] < 1:
            raise RenderError(f"Cannot render image to a {target[0]}x{target[1]} surface")

        try:
            if target != rgba.size:
                rgba = rgba.resize(target, self.resample)
            buffer = PixelBuffer.from_image(rgba)
        except Exception as exc:
            raise RenderError(f"Failed to render image at {target[0]}x{target[1]}: {exc}") from exc

        logger.debug(f"Decoded {len(data)} bytes into a {buffer.width}x{buffer.height} buffer")
        return buffer
