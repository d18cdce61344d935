"""Feature schema for the scikit-learn Breast Cancer Wisconsin dataset.

The order of ``FEATURES`` is what the backend receives; never reorder it.
"""
import re
from typing import Dict, List, Tuple

FEATURES: Tuple[str, ...] = (
    "mean radius", "mean texture", "mean perimeter", "mean area", "mean smoothness",
    "mean compactness", "mean concavity", "mean concave points", "mean symmetry", "mean fractal dimension",
    "radius error", "texture error", "perimeter error", "area error", "smoothness error",
    "compactness error", "concavity error", "concave points error", "symmetry error", "fractal dimension error",
    "worst radius", "worst texture", "worst perimeter", "worst area", "worst smoothness",
    "worst compactness", "worst concavity", "worst concave points", "worst symmetry", "worst fractal dimension",
)

N_FEATURES = len(FEATURES)

_NON_ALNUM = re.compile(r"[^a-z0-9]+", re.IGNORECASE)


def to_key(name: str) -> str:
    return _NON_ALNUM.sub("_", name).lower()


FEATURE_KEYS: List[str] = [to_key(f) for f in FEATURES]

# Rough dataset scales, used only by the random fill helper
FEATURE_RANGES: Dict[str, Tuple[float, float]] = {
    "mean_radius": (6, 28), "mean_texture": (9, 40), "mean_perimeter": (40, 190), "mean_area": (140, 2500),
    "mean_smoothness": (0.05, 0.2), "mean_compactness": (0.0, 0.4), "mean_concavity": (0.0, 0.5),
    "mean_concave_points": (0.0, 0.3), "mean_symmetry": (0.1, 0.4), "mean_fractal_dimension": (0.04, 0.1),
    "radius_error": (0.1, 3.0), "texture_error": (0.2, 5.0), "perimeter_error": (0.5, 25), "area_error": (5, 550),
    "smoothness_error": (0.001, 0.02), "compactness_error": (0.0, 0.1), "concavity_error": (0.0, 0.3),
    "concave_points_error": (0.0, 0.07), "symmetry_error": (0.005, 0.08), "fractal_dimension_error": (0.001, 0.03),
    "worst_radius": (7, 40), "worst_texture": (10, 50), "worst_perimeter": (50, 260), "worst_area": (180, 4500),
    "worst_smoothness": (0.07, 0.25), "worst_compactness": (0.02, 1.5), "worst_concavity": (0.02, 1.5),
    "worst_concave_points": (0.0, 0.5), "worst_symmetry": (0.1, 0.6), "worst_fractal_dimension": (0.04, 0.2),
}

DEFAULT_RANGE: Tuple[float, float] = (0.0, 1.0)


def feature_range(key: str) -> Tuple[float, float]:
    return FEATURE_RANGES.get(key, DEFAULT_RANGE)
