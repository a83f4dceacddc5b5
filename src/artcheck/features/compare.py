"""Weighted cosine comparison of feature vectors."""

from typing import Optional, Sequence

import numpy as np

from ..config import FeatureSettings
from .extract import FeatureVector


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """Cosine of the angle between two vectors; 0 if lengths differ or either is all zeros."""
    if len(a) != len(b):
        return 0.0

    vec_a = np.asarray(a, dtype=np.float64)
    vec_b = np.asarray(b, dtype=np.float64)
    magnitude = np.linalg.norm(vec_a) * np.linalg.norm(vec_b)
    if magnitude == 0:
        return 0.0
    return float(np.dot(vec_a, vec_b) / magnitude)


def compare_features(
    features_a: FeatureVector,
    features_b: FeatureVector,
    settings: Optional[FeatureSettings] = None,
) -> float:
    """
    Weighted similarity of two feature vectors.

    Args:
        features_a: First image features
        features_b: Second image features
        settings: Group weights (color, edge, texture)

    Returns:
        Weighted sum of per-group cosine similarities, in [0, 1] for
        non-negative features
    """
    settings = settings or FeatureSettings()
    color = cosine_similarity(features_a.color_histogram, features_b.color_histogram)
    edge = cosine_similarity(features_a.edge_histogram, features_b.edge_histogram)
    texture = cosine_similarity(features_a.texture_features, features_b.texture_features)

    return (
        color * settings.color_weight
        + edge * settings.edge_weight
        + texture * settings.texture_weight
    )
