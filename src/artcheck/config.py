import math
from dataclasses import dataclass, field
from typing import Tuple


@dataclass(frozen=True)
class HashSettings:
    grid_size: int = 32
    dct_size: int = 8


@dataclass(frozen=True)
class MatchSettings:
    strict_threshold: int = 12     # exact duplicates
    moderate_threshold: int = 20   # similar images, gates search output
    hash_bits: int = 64

    def __post_init__(self) -> None:
        # Hex hashes are decoded as square bit grids (8x8 for 64 bits)
        side = math.isqrt(max(self.hash_bits, 0))
        if self.hash_bits <= 0 or self.hash_bits % 4 or side * side != self.hash_bits:
            raise ValueError(f"hash_bits must be a square multiple of 4, got {self.hash_bits}")


@dataclass(frozen=True)
class FeatureSettings:
    size: int = 256
    color_bins: int = 16
    edge_bins: int = 10
    color_weight: float = 0.4
    edge_weight: float = 0.4
    texture_weight: float = 0.2


@dataclass(frozen=True)
class ScreenshotSettings:
    resolutions: Tuple[Tuple[int, int], ...] = (
        (1920, 1080), (1440, 900), (1366, 768),
        (1024, 768), (2560, 1440), (3840, 2160),
        (1280, 720), (1600, 1200), (2880, 1800),
    )
    aspect_ratios: Tuple[Tuple[str, float], ...] = (
        ("16:9", 16 / 9),
        ("4:3", 4 / 3),
        ("3:2", 3 / 2),
        ("16:10", 16 / 10),
    )
    aspect_tolerance: float = 0.01

    resolution_weight: float = 0.20
    aspect_weight: float = 0.15

    low_diversity_ratio: float = 0.03
    low_diversity_weight: float = 0.25
    limited_palette_ratio: float = 0.06
    limited_palette_weight: float = 0.05

    edge_stride: int = 5
    crisp_edge_threshold: float = 180.0
    crisp_edge_weight: float = 0.15
    sharp_pixel_strength: float = 80.0
    sharp_pixel_ratio: float = 0.25
    sharp_pixel_weight: float = 0.10

    block_samples: int = 100
    block_size: int = 8
    block_margin: int = 10
    block_variance_threshold: float = 5.0
    blockiness_ratio: float = 0.35
    blockiness_weight: float = 0.10

    decision_threshold: float = 0.70


@dataclass(frozen=True)
class Settings:
    hashing: HashSettings = field(default_factory=HashSettings)
    matching: MatchSettings = field(default_factory=MatchSettings)
    features: FeatureSettings = field(default_factory=FeatureSettings)
    screenshot: ScreenshotSettings = field(default_factory=ScreenshotSettings)
