"""Color, edge and texture features for image similarity."""

from .extract import FeatureVector, analyze_image_features, extract_features
from .compare import compare_features, cosine_similarity

__all__ = [
    "FeatureVector",
    "analyze_image_features",
    "extract_features",
    "compare_features",
    "cosine_similarity",
]
