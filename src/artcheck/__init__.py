"""artcheck: perceptual fingerprints, near-duplicate matching and screenshot scoring for artwork uploads."""

from .config import Settings
from .pipeline import UploadReport, analyze_upload

__all__ = ["Settings", "UploadReport", "analyze_upload"]
