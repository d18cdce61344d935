import json

import numpy as np

from client import PredictionClient
from normalizer import empty_vector
from state import AppState


def test_paste_replaces_vector_and_clears_error(sample_row):
    app = AppState()
    app.error = "old"
    assert app.paste(json.dumps(sample_row))
    assert app.ready
    assert app.error is None
    assert app.log[-1]["event"] == "paste_applied"


def test_failed_paste_keeps_vector(sample_vector):
    app = AppState(values=dict(sample_vector))
    assert not app.paste("1, 2, 3")
    assert app.values == sample_vector
    assert "30 numeric values" in app.error


def test_rejected_edit_is_logged():
    app = AppState()
    assert not app.edit("mean_radius", "abc")
    assert app.values["mean_radius"] is None
    assert app.log[-1]["event"] == "edit_rejected"
    assert app.log[-1]["feature"] == "mean_radius"


def test_clear_resets_everything(make_session, sample_vector):
    app = AppState(values=dict(sample_vector))
    app.submit(PredictionClient(session=make_session(payload={"prediction": 0})))
    assert app.result is not None

    app.clear()
    assert app.values == empty_vector()
    assert app.result is None and app.error is None
    assert not app.can_submit


def test_fill_random_makes_vector_ready():
    app = AppState()
    app.fill_random(np.random.default_rng(1))
    assert app.can_submit


def test_submit_success(make_session, sample_vector):
    app = AppState(endpoint="/predict", values=dict(sample_vector))
    result = app.submit(PredictionClient(session=make_session(payload={"prediction": 0, "proba": [0.91, 0.09]})))
    assert result.label == "benign"
    assert app.result == result
    assert app.error is None
    assert not app.pending
    events = [e["event"] for e in app.log]
    assert events[-2:] == ["prediction_requested", "prediction_received"]


def test_submit_failure_preserves_input(make_session, sample_vector):
    app = AppState(values=dict(sample_vector))
    app.submit(PredictionClient(session=make_session(payload={"prediction": 1})))
    assert app.result is not None

    out = app.submit(PredictionClient(session=make_session(status_code=503, reason="Service Unavailable")))
    assert out is None
    assert app.result is None
    assert app.error == "Backend 503 Service Unavailable"
    assert app.values == sample_vector
    assert not app.pending


def test_submit_refuses_incomplete_vector(make_session):
    session = make_session(payload={"prediction": 0})
    app = AppState()
    assert app.submit(PredictionClient(session=session)) is None
    assert session.calls == []
    assert app.error


def test_submit_ignored_while_pending(make_session, sample_vector):
    session = make_session(payload={"prediction": 0})
    app = AppState(values=dict(sample_vector), pending=True)
    assert not app.can_submit
    assert app.submit(PredictionClient(session=session)) is None
    assert session.calls == []


def test_snapshot_is_a_copy(sample_vector):
    app = AppState(values=dict(sample_vector))
    snapshot = app.submit_start()
    app.values["mean_radius"] = 1.0
    assert snapshot["mean_radius"] == 17.99
    assert app.pending


def test_oversized_number_in_paste_is_reported_inline(sample_vector, sample_row):
    app = AppState(values=dict(sample_vector))
    text = "[" + ", ".join(["1" * 400] + [str(v) for v in sample_row[1:]]) + "]"
    assert not app.paste(text)
    assert app.values == sample_vector
    assert app.error


def test_incomplete_submit_clears_previous_result(make_session, sample_vector):
    session = make_session(payload={"prediction": 1})
    app = AppState(values=dict(sample_vector))
    app.submit(PredictionClient(session=session))
    assert app.result is not None

    app.edit("mean_radius", "")
    assert app.submit(PredictionClient(session=session)) is None
    assert app.result is None
    assert app.error
    assert len(session.calls) == 1
