import json
import os
from functools import lru_cache
from pathlib import Path
from typing import Dict, List, Sequence

import joblib
import numpy as np

from features import FEATURE_KEYS, FEATURES, N_FEATURES, feature_range

ART = Path(os.getenv("ARTIFACTS_DIR", "artifacts"))
MODEL_FILE = "model.pkl"
META_FILE = "feature_meta.json"


class ModelNotAvailable(RuntimeError):
    """Raised when the trained pipeline has not been produced yet (run train.py)."""


@lru_cache(maxsize=1)
def load_pipeline():
    """Load the scaler -> SVC pipeline written by train.py."""
    path = ART / MODEL_FILE
    if not path.exists():
        raise ModelNotAvailable(f"No model at {path}; run `python train.py` first")
    return joblib.load(path)


@lru_cache(maxsize=1)
def load_meta() -> Dict:
    path = ART / META_FILE
    if not path.exists():
        return {}
    with open(path) as f:
        return json.load(f)


def _check_contract(feature_names: Sequence[str], features: Sequence[float]) -> np.ndarray:
    """Names must match the schema order exactly; values must be 30 finite numbers."""
    if list(feature_names) != list(FEATURES):
        unexpected = [n for n, f in zip(feature_names, FEATURES) if n != f]
        raise ValueError(
            "feature_names do not match the expected order"
            + (f" (first mismatch: {unexpected[0]!r})" if unexpected else "")
        )
    if len(features) != N_FEATURES:
        raise ValueError(f"expected {N_FEATURES} features, got {len(features)}")
    x = np.asarray(features, dtype=float).reshape(1, -1)
    if not np.isfinite(x).all():
        raise ValueError("features must be finite numbers")
    return x


def predict_vector(feature_names: Sequence[str], features: Sequence[float]) -> Dict:
    x = _check_contract(feature_names, features)
    pipe = load_pipeline()

    y = int(pipe.predict(x)[0])
    resp: Dict = {"prediction": y}

    # [p_benign, p_malignant] as long as the classes are {0: benign, 1: malignant}
    prob = getattr(pipe, "predict_proba", None)
    if prob is not None:
        resp["proba"] = [float(p) for p in prob(x)[0]]
    return resp


def get_meta() -> Dict:
    meta = load_meta()
    ranges: Dict[str, List[float]] = meta.get("ranges") or {
        k: list(feature_range(k)) for k in FEATURE_KEYS
    }
    return {
        "features": list(FEATURES),
        "keys": FEATURE_KEYS,
        "ranges": ranges,
        "classes": meta.get("classes", {"0": "benign", "1": "malignant"}),
        "model_ready": (ART / MODEL_FILE).exists(),
    }
