"""Screenshot-likeness scoring for uploaded artwork."""

from .heuristics import ScreenshotVerdict, analyze_screenshot, detect_screenshot

__all__ = [
    "ScreenshotVerdict",
    "analyze_screenshot",
    "detect_screenshot",
]
