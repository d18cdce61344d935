import math
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple, Union

from pydantic import BaseModel, StrictFloat, StrictInt, StrictStr, field_validator

from features import N_FEATURES


class PredictRequest(BaseModel):
    feature_names: List[str]
    features: List[float]
    meta: Optional[Dict[str, Any]] = None   # informational, e.g. {"source": "ui-streamlit"}

    @field_validator("feature_names")
    @classmethod
    def _check_names(cls, v: List[str]) -> List[str]:
        if len(v) != N_FEATURES:
            raise ValueError(f"expected {N_FEATURES} feature names, got {len(v)}")
        return v

    @field_validator("features")
    @classmethod
    def _check_features(cls, v: List[float]) -> List[float]:
        if len(v) != N_FEATURES:
            raise ValueError(f"expected {N_FEATURES} features, got {len(v)}")
        if not all(math.isfinite(x) for x in v):
            raise ValueError("features must be finite numbers")
        return v


class PredictResponse(BaseModel):
    prediction: Union[StrictInt, StrictFloat, StrictStr]
    proba: Optional[List[float]] = None     # [p_benign, p_malignant]

    @field_validator("proba", mode="before")
    @classmethod
    def _drop_unusable_proba(cls, v):
        # anything but a list of plain numbers is treated as "no probabilities"
        if not isinstance(v, list):
            return None
        if not all(isinstance(x, (int, float)) and not isinstance(x, bool) for x in v):
            return None
        return v


class Outcome(str, Enum):
    BENIGN = "benign"
    MALIGNANT = "malignant"
    OTHER = "other"


class PredictionResult(BaseModel):
    """A backend answer normalized for display."""
    label: str
    outcome: Outcome
    proba: Optional[Tuple[float, float]] = None   # (benign, malignant)

    @property
    def is_malignant(self) -> bool:
        return self.outcome is Outcome.MALIGNANT
