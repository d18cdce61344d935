import numpy as np
import pytest
from fastapi.testclient import TestClient

import model_utils
from api import app
from features import FEATURES


class StubPipeline:
    def __init__(self, label=0, proba=(0.91, 0.09)):
        self.label = label
        self.proba = proba
        self.seen = None

    def predict(self, x):
        self.seen = x
        return np.array([self.label])

    def predict_proba(self, x):
        return np.array([self.proba])


class NoProbaPipeline:
    def predict(self, x):
        return np.array([1])


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def stub(monkeypatch):
    pipe = StubPipeline()
    monkeypatch.setattr(model_utils, "load_pipeline", lambda: pipe)
    return pipe


def _body(row, names=None):
    return {"feature_names": list(names or FEATURES), "features": row, "meta": {"source": "test"}}


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_predict_returns_label_and_proba(client, stub, sample_row):
    resp = client.post("/predict", json=_body(sample_row))
    assert resp.status_code == 200
    assert resp.json() == {"prediction": 0, "proba": [0.91, 0.09]}
    assert stub.seen.shape == (1, 30)
    assert stub.seen[0, 0] == pytest.approx(17.99)


def test_predict_without_predict_proba(client, monkeypatch, sample_row):
    monkeypatch.setattr(model_utils, "load_pipeline", lambda: NoProbaPipeline())
    resp = client.post("/predict", json=_body(sample_row))
    assert resp.status_code == 200
    assert resp.json() == {"prediction": 1}


def test_reordered_names_are_rejected(client, stub, sample_row):
    names = list(FEATURES)
    names[0], names[1] = names[1], names[0]
    resp = client.post("/predict", json=_body(sample_row, names))
    assert resp.status_code == 400
    assert "order" in resp.json()["detail"]


def test_wrong_length_fails_validation(client, stub, sample_row):
    resp = client.post("/predict", json=_body(sample_row[:29]))
    assert resp.status_code == 422


def test_missing_model_is_503(client, monkeypatch, tmp_path, sample_row):
    monkeypatch.setattr(model_utils, "ART", tmp_path)
    model_utils.load_pipeline.cache_clear()
    resp = client.post("/predict", json=_body(sample_row))
    assert resp.status_code == 503
    model_utils.load_pipeline.cache_clear()


def test_meta_lists_features_in_order(client, monkeypatch, tmp_path):
    monkeypatch.setattr(model_utils, "ART", tmp_path)
    model_utils.load_meta.cache_clear()
    meta = client.get("/meta").json()
    assert meta["features"] == list(FEATURES)
    assert meta["ranges"]["mean_radius"] == [6, 28]
    assert meta["model_ready"] is False
    model_utils.load_meta.cache_clear()
