"""Reference FastAPI backend for the breast cancer predictor UI.

Run:
  uvicorn api:app --reload --port 8000
"""
from typing import Dict

from fastapi import FastAPI, HTTPException

from model_utils import ModelNotAvailable, get_meta, predict_vector
from schema import PredictRequest, PredictResponse

app = FastAPI(
    title="Breast Cancer SVC API",
    description=(
        "Classify a 30-feature Breast Cancer Wisconsin vector with a "
        "StandardScaler -> SVC pipeline. 0 = benign, 1 = malignant."
    ),
    version="0.1.0",
)


@app.get("/health")
def health() -> Dict:
    return {"status": "ok"}


@app.get("/meta")
def read_meta() -> Dict:
    """Return the expected feature order and value ranges."""
    return get_meta()


@app.post("/predict", response_model=PredictResponse, response_model_exclude_none=True)
def predict(req: PredictRequest) -> PredictResponse:
    try:
        result = predict_vector(req.feature_names, req.features)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except ModelNotAvailable as exc:
        raise HTTPException(status_code=503, detail=str(exc)) from exc
    return PredictResponse(**result)
