"""HTTP client for the external prediction service.

One call = one POST of ``{"feature_names", "features", "meta"}`` and one
``{"prediction", "proba"}`` answer. Any failure surfaces as a single
``PredictionError`` whose message is meant to be shown to the user.
"""
import logging
import os
from typing import Any, Optional, Sequence
from urllib.parse import urljoin

import requests
from pydantic import ValidationError

from features import FEATURES
from normalizer import FeatureVector, ordered_vector
from schema import Outcome, PredictionResult, PredictRequest, PredictResponse

logger = logging.getLogger(__name__)

DEFAULT_ENDPOINT = os.getenv("PREDICT_ENDPOINT", "/predict")
DEFAULT_BASE_URL = os.getenv("PREDICT_BASE_URL", "http://localhost:8000")
REQUEST_SOURCE = "ui-streamlit"


def _env_timeout() -> Optional[float]:
    raw = os.getenv("PREDICT_TIMEOUT", "").strip()
    return float(raw) if raw else None


DEFAULT_TIMEOUT = _env_timeout()   # None: no client-side timeout


class PredictionError(RuntimeError):
    """Transport or backend failure, with a human-readable message."""


def resolve_endpoint(endpoint: str, base_url: str = DEFAULT_BASE_URL) -> str:
    """Absolute URLs pass through; paths such as ``/predict`` are joined to ``base_url``."""
    endpoint = (endpoint or "").strip()
    if not endpoint:
        raise PredictionError("No prediction endpoint configured")
    if endpoint.startswith(("http://", "https://")):
        return endpoint
    return urljoin(base_url.rstrip("/") + "/", endpoint.lstrip("/"))


def build_payload(values: FeatureVector, source: Optional[str] = REQUEST_SOURCE) -> PredictRequest:
    return PredictRequest(
        feature_names=list(FEATURES),
        features=ordered_vector(values),
        meta={"source": source} if source else None,
    )


def normalize_prediction(raw: Any, proba: Optional[Sequence[float]] = None) -> PredictionResult:
    """Map a raw ``prediction`` value (0, 1 or a label) to a display result."""
    if isinstance(raw, (int, float)) and not isinstance(raw, bool) and raw == 0:
        label = "benign"
    elif isinstance(raw, (int, float)) and not isinstance(raw, bool) and raw == 1:
        label = "malignant"
    else:
        label = str(raw)

    lowered = label.lower()
    if "malig" in lowered:
        outcome = Outcome.MALIGNANT
    elif "benign" in lowered:
        outcome = Outcome.BENIGN
    else:
        outcome = Outcome.OTHER

    pair = None
    if proba is not None and len(proba) >= 2:
        pair = (float(proba[0]), float(proba[1]))
    return PredictionResult(label=label, outcome=outcome, proba=pair)


def format_probabilities(result: PredictionResult) -> Optional[str]:
    if result.proba is None:
        return None
    p_benign, p_malignant = result.proba
    return f"Benign: {p_benign:.3f} · Malignant: {p_malignant:.3f}"


class PredictionClient:
    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        timeout: Optional[float] = DEFAULT_TIMEOUT,
        session: Optional[requests.Session] = None,
        source: Optional[str] = REQUEST_SOURCE,
    ):
        self.base_url = base_url
        self.timeout = timeout
        self.session = session if session is not None else requests.Session()
        self.source = source

    def predict(self, endpoint: str, values: FeatureVector) -> PredictionResult:
        url = resolve_endpoint(endpoint, self.base_url)
        payload = build_payload(values, self.source)
        logger.info("POST %s (%d features)", url, len(payload.features))

        try:
            response = self.session.post(
                url,
                json=payload.model_dump(exclude_none=True),
                headers={"Content-Type": "application/json"},
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            logger.warning("Prediction request to %s failed: %s", url, exc)
            raise PredictionError(f"Could not reach backend: {exc}") from exc

        if not 200 <= response.status_code < 300:
            logger.warning("Backend answered %s %s", response.status_code, response.reason)
            raise PredictionError(f"Backend {response.status_code} {response.reason or ''}".strip())

        try:
            data = response.json()
        except ValueError as exc:
            raise PredictionError("Backend response is not valid JSON") from exc
        if not isinstance(data, dict):
            raise PredictionError("Backend response is not a JSON object")

        try:
            parsed = PredictResponse.model_validate(data)
        except ValidationError as exc:
            errs = "; ".join(f"{'.'.join(map(str, e['loc']))}: {e['msg']}" for e in exc.errors())
            raise PredictionError(f"Malformed backend response ({errs})") from exc

        result = normalize_prediction(parsed.prediction, parsed.proba)
        logger.debug("Prediction %s proba=%s", result.label, result.proba)
        return result
