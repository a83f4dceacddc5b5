import json

import pytest
from typer.testing import CliRunner

from artcheck.cli import app
from artcheck.dedup.hash import hash_image
from tests.helpers.image_factory import artwork_image, png_bytes

runner = CliRunner()


@pytest.fixture
def image_file(tmp_path):
    path = tmp_path / "upload.png"
    path.write_bytes(png_bytes(artwork_image(120, 90, seed=2)))
    return path


def write_corpus(tmp_path, rows):
    path = tmp_path / "corpus.json"
    path.write_text(json.dumps(rows), encoding="utf-8")
    return path


class TestCLIBasicFunctionality:
    def test_help_command_works(self):
        result = runner.invoke(app, ["--help"])

        assert result.exit_code == 0
        for command in ("hash", "match", "compare", "screenshot"):
            assert command in result.stdout

    def test_hash_prints_fingerprint(self, image_file):
        result = runner.invoke(app, ["hash", str(image_file)])

        assert result.exit_code == 0
        assert result.stdout.strip() == hash_image(image_file.read_bytes())

    def test_hash_missing_file(self, tmp_path):
        result = runner.invoke(app, ["hash", str(tmp_path / "missing.png")])
        assert result.exit_code != 0

    def test_hash_undecodable_file(self, tmp_path):
        path = tmp_path / "broken.png"
        path.write_bytes(b"not an image")

        result = runner.invoke(app, ["hash", str(path)])
        assert result.exit_code == 1


class TestMatchCommand:
    def test_exact_match(self, tmp_path, image_file):
        phash = hash_image(image_file.read_bytes())
        corpus = write_corpus(tmp_path, [
            {"id": "a1", "perceptual_hash": None, "title": "Empty", "user_id": "u0"},
            {"id": "a2", "perceptual_hash": phash, "title": "Harbor", "user_id": "u7"},
        ])

        result = runner.invoke(app, ["match", str(image_file), "--corpus", str(corpus)])

        assert result.exit_code == 0
        assert "Match: a2 (Harbor)" in result.stdout
        assert "Owner: u7" in result.stdout
        assert "Distance: 0" in result.stdout
        assert "Confidence: 1.00" in result.stdout
        assert "Level: exact" in result.stdout

    def test_no_match(self, tmp_path, image_file):
        phash = hash_image(image_file.read_bytes())
        inverted = f"{int(phash, 16) ^ (2 ** 64 - 1):016x}"
        corpus = write_corpus(tmp_path, [{"id": "a1", "perceptual_hash": inverted}])

        result = runner.invoke(app, ["match", str(image_file), "--corpus", str(corpus)])

        assert result.exit_code == 0
        assert "No similar artwork found" in result.stdout

    def test_invalid_corpus(self, tmp_path, image_file):
        corpus = tmp_path / "corpus.json"
        corpus.write_text('{"id": "not a list"}', encoding="utf-8")

        result = runner.invoke(app, ["match", str(image_file), "--corpus", str(corpus)])
        assert result.exit_code == 2


class TestCompareCommand:
    def test_identical_images(self, image_file):
        result = runner.invoke(app, ["compare", str(image_file), str(image_file)])

        assert result.exit_code == 0
        assert "Similarity: 1.0000" in result.stdout


class TestScreenshotCommand:
    def test_reports_verdict(self, image_file):
        result = runner.invoke(app, ["screenshot", str(image_file), "--seed", "1"])

        assert result.exit_code == 0
        assert "Screenshot: no" in result.stdout
        assert "Confidence:" in result.stdout

    def test_undecodable_image_is_not_an_error(self, tmp_path):
        path = tmp_path / "broken.png"
        path.write_bytes(b"not an image")

        result = runner.invoke(app, ["screenshot", str(path)])

        assert result.exit_code == 0
        assert "Unable to load image" in result.stdout
