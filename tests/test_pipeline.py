"""End-to-end tests for upload analysis."""

import numpy as np
import pytest
from PIL import Image

from artcheck.config import MatchSettings, Settings
from artcheck.dedup.hash import hash_image
from artcheck.dedup.model import ArtworkRecord
from artcheck.pipeline import UploadReport, analyze_upload
from artcheck.raster import DecodeError
from tests.helpers.image_factory import artwork_image, png_bytes


@pytest.fixture
def upload() -> bytes:
    return png_bytes(artwork_image(160, 120, seed=1))


class TestAnalyzeUpload:
    def test_reupload_detected(self, upload):
        stored = ArtworkRecord(id="art-1", perceptual_hash=hash_image(upload), title="Harbor", user_id="u-1")
        corpus = [ArtworkRecord(id="art-0", perceptual_hash=None), stored]

        report = analyze_upload(upload, corpus, rng=np.random.default_rng(0))

        assert isinstance(report, UploadReport)
        assert report.perceptual_hash == stored.perceptual_hash
        assert report.match.artwork is stored
        assert report.match.distance == 0
        assert report.match.confidence == 1.0
        assert report.features is None

    def test_recompressed_copy_still_matches(self, upload):
        stored = ArtworkRecord(id="art-1", perceptual_hash=hash_image(upload))
        resized = png_bytes(artwork_image(160, 120, seed=1).resize((320, 240), Image.Resampling.BILINEAR))

        report = analyze_upload(resized, [stored], rng=np.random.default_rng(0))

        assert report.match is not None
        assert report.match.distance <= 20

    def test_no_match_in_unrelated_corpus(self, upload):
        phash = hash_image(upload)
        inverted = f"{int(phash, 16) ^ (2 ** 64 - 1):016x}"

        report = analyze_upload(upload, [ArtworkRecord(id="other", perceptual_hash=inverted)])

        assert report.match is None

    def test_screenshot_verdict_included(self, upload):
        report = analyze_upload(upload, [], rng=np.random.default_rng(0))
        assert not report.screenshot.is_screenshot
        assert 0.0 <= report.screenshot.confidence <= 1.0

    def test_features_optional(self, upload):
        report = analyze_upload(upload, [], include_features=True)
        assert len(report.features.color_histogram) == 48

    def test_settings_flow_through(self, upload):
        phash = hash_image(upload)
        near = f"{int(phash, 16) ^ 0b111:016x}"
        settings = Settings(matching=MatchSettings(moderate_threshold=2))

        report = analyze_upload(upload, [ArtworkRecord(id="near", perceptual_hash=near)], settings=settings)

        assert report.match is None

    def test_undecodable_upload_raises(self):
        """Hashing failures propagate even though screenshot scoring would absorb them."""
        with pytest.raises(DecodeError):
            analyze_upload(b"garbage", [])
