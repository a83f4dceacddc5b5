import json
from dataclasses import replace
from pathlib import Path
from typing import List, Optional

import numpy as np
import typer

from .config import Settings
from .logging import get_logger
from .raster import PillowRasterizer, RasterError
from .dedup.hash import hash_image
from .dedup.model import ArtworkRecord
from .dedup.search import classify_match, find_similar_artwork
from .features.extract import analyze_image_features
from .features.compare import compare_features
from .screenshot.heuristics import analyze_screenshot

app = typer.Typer(help="artcheck – artwork fingerprinting and originality checks", no_args_is_help=True)


def load_corpus(corpus_path: Path) -> List[ArtworkRecord]:
    """Read a JSON list of artwork rows (id, perceptual_hash, title, user_id)."""
    with open(corpus_path, encoding="utf-8") as f:
        rows = json.load(f)
    if not isinstance(rows, list):
        raise ValueError(f"Corpus must be a JSON list of artworks, got {type(rows).__name__}")
    return [ArtworkRecord.from_dict(row) for row in rows]


def _hash_file(image_path: Path, settings: Settings) -> str:
    logger = get_logger(__name__)
    try:
        return hash_image(image_path.read_bytes(), PillowRasterizer(), settings.hashing)
    except RasterError as exc:
        logger.error(f"Cannot fingerprint {image_path}: {exc}")
        raise typer.Exit(code=1) from exc


@app.command("hash")
def hash_command(
    image_path: Path = typer.Argument(..., exists=True, readable=True, help="Image to fingerprint"),
) -> None:
    """Print the 64-bit perceptual hash of an image."""
    typer.echo(_hash_file(image_path, Settings()))


@app.command()
def match(
    image_path: Path = typer.Argument(..., exists=True, readable=True, help="Uploaded image"),
    corpus: Path = typer.Option(..., "--corpus", "-c", exists=True, readable=True, help="JSON file of stored artworks"),
    moderate_threshold: int = typer.Option(20, help="Maximum Hamming distance for a match"),
    strict_threshold: int = typer.Option(12, help="Maximum Hamming distance for an exact duplicate"),
) -> None:
    """Find the stored artwork most similar to an image."""
    logger = get_logger(__name__)
    settings = Settings()

    try:
        artworks = load_corpus(corpus)
    except (OSError, ValueError, KeyError, TypeError) as exc:
        logger.error(f"Failed to load corpus {corpus}: {exc}")
        raise typer.Exit(code=2) from exc

    logger.info(f"Loaded {len(artworks)} artworks from {corpus}")
    phash = _hash_file(image_path, settings)

    match_settings = replace(
        settings.matching,
        moderate_threshold=moderate_threshold,
        strict_threshold=strict_threshold,
    )
    result = find_similar_artwork(phash, artworks, match_settings)

    typer.echo(f"Hash: {phash}")
    if result is None:
        typer.echo("No similar artwork found")
        return

    level = classify_match(result, match_settings)
    typer.echo(f"Match: {result.artwork.id} ({result.artwork.title or 'untitled'})")
    typer.echo(f"Owner: {result.artwork.user_id or 'unknown'}")
    typer.echo(f"Distance: {result.distance}")
    typer.echo(f"Confidence: {result.confidence:.2f}")
    typer.echo(f"Level: {level.value}")


@app.command()
def compare(
    image_a: Path = typer.Argument(..., exists=True, readable=True, help="First image"),
    image_b: Path = typer.Argument(..., exists=True, readable=True, help="Second image"),
) -> None:
    """Print the weighted color/edge/texture similarity of two images."""
    logger = get_logger(__name__)
    settings = Settings()
    rasterizer = PillowRasterizer()

    try:
        features_a = analyze_image_features(image_a.read_bytes(), rasterizer, settings.features)
        features_b = analyze_image_features(image_b.read_bytes(), rasterizer, settings.features)
    except RasterError as exc:
        logger.error(f"Cannot extract features: {exc}")
        raise typer.Exit(code=1) from exc

    similarity = compare_features(features_a, features_b, settings.features)
    typer.echo(f"Similarity: {similarity:.4f}")


@app.command()
def screenshot(
    image_path: Path = typer.Argument(..., exists=True, readable=True, help="Image to score"),
    seed: Optional[int] = typer.Option(None, help="Seed for block sampling, for reproducible scores"),
) -> None:
    """Score an image for screenshot-like properties."""
    verdict = analyze_screenshot(
        image_path.read_bytes(),
        PillowRasterizer(),
        Settings().screenshot,
        np.random.default_rng(seed),
    )

    typer.echo(f"Screenshot: {'yes' if verdict.is_screenshot else 'no'}")
    typer.echo(f"Confidence: {verdict.confidence:.2f}")
    for reason in verdict.reasons or (verdict.reason,):
        typer.echo(f"  - {reason}")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
