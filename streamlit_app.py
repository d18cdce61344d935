"""Streamlit front end for a breast cancer SVC prediction service.

Run:
  streamlit run streamlit_app.py
"""
import json

import pandas as pd
import plotly.graph_objects as go
import streamlit as st

from client import (
    DEFAULT_BASE_URL,
    PredictionClient,
    PredictionError,
    format_probabilities,
    resolve_endpoint,
)
from features import FEATURE_KEYS, FEATURES, N_FEATURES
from normalizer import format_value
from state import AppState

st.set_page_config(page_title="Breast Cancer SVC – Predictor", layout="wide")

# ----------------------------
# Session state initialization
# ----------------------------
if "app" not in st.session_state:
    st.session_state["app"] = AppState()
if "bulk" not in st.session_state:
    st.session_state["bulk"] = ""

app: AppState = st.session_state["app"]

if "endpoint" not in st.session_state:
    st.session_state["endpoint"] = app.endpoint


def _field_key(key: str) -> str:
    return f"field_{key}"


for _k in FEATURE_KEYS:
    if _field_key(_k) not in st.session_state:
        st.session_state[_field_key(_k)] = format_value(app.values[_k])


@st.cache_resource
def get_client() -> PredictionClient:
    return PredictionClient()


# ----------------------------
# Callbacks (run before the page re-renders)
# ----------------------------
def _sync_fields() -> None:
    for k in FEATURE_KEYS:
        st.session_state[_field_key(k)] = format_value(app.values[k])


def _on_field_change(key: str) -> None:
    raw = st.session_state[_field_key(key)]
    if not app.edit(key, raw):
        # rejected: show the value we still hold
        st.session_state[_field_key(key)] = format_value(app.values[key])


def _on_endpoint_change() -> None:
    app.set_endpoint(st.session_state["endpoint"])


def _on_fill_random() -> None:
    app.fill_random()
    _sync_fields()


def _on_clear() -> None:
    app.clear()
    _sync_fields()


def _on_paste() -> None:
    if app.paste(st.session_state["bulk"]):
        _sync_fields()


# ----------------------------
# Header + settings
# ----------------------------
st.title("Breast Cancer SVC – Predictor")
st.caption(
    f"Enter the {N_FEATURES} features used by the scikit-learn Breast Cancer dataset. "
    "The vector is sent in the exact order expected by most notebooks."
)

st.sidebar.header("⚙️ Backend")
st.sidebar.text_input(
    "Prediction endpoint",
    key="endpoint",
    on_change=_on_endpoint_change,
    placeholder="https://your-api.example.com/predict",
)
try:
    st.sidebar.caption(f"Requests go to `{resolve_endpoint(app.endpoint, DEFAULT_BASE_URL)}`")
except PredictionError as exc:
    st.sidebar.warning(str(exc))

left, right = st.columns([2, 1])

# ----------------------------
# Feature inputs
# ----------------------------
with left:
    cols = st.columns(3)
    for i, (name, key) in enumerate(zip(FEATURES, FEATURE_KEYS)):
        with cols[i % 3]:
            st.text_input(
                name,
                key=_field_key(key),
                placeholder="0",
                on_change=_on_field_change,
                args=(key,),
            )

    b1, b2, b3 = st.columns(3)
    with b1:
        st.button("🪄 Fill Random", on_click=_on_fill_random, use_container_width=True)
    with b2:
        st.button("✖️ Clear", on_click=_on_clear, use_container_width=True)
    with b3:
        predict_clicked = st.button(
            "Predict",
            type="primary",
            disabled=not app.can_submit,
            use_container_width=True,
        )

    if predict_clicked:
        with st.spinner("Predicting…"):
            app.submit(get_client())

# ----------------------------
# Bulk paste + results
# ----------------------------
with right:
    st.subheader("Bulk paste")
    st.caption(
        f"Paste a single CSV row or a JSON array of {N_FEATURES} numbers. "
        "We'll map it to the correct order."
    )
    st.text_area("Values", key="bulk", placeholder="[17.99, 10.38, … 0.1189]", height=120,
                 label_visibility="collapsed")
    st.button("📥 Use Values", on_click=_on_paste)

    st.subheader("Result")
    if app.result is None and app.error is None:
        st.caption("Run a prediction to see the output.")
    if app.error:
        st.error(app.error)
    if app.result is not None:
        res = app.result
        icon = "❌" if res.is_malignant else "✅"
        st.markdown(f"### {icon} Prediction: {res.label}")

        probs = format_probabilities(res)
        if probs:
            st.write(f"Probabilities → {probs}")
            fig = go.Figure(go.Bar(
                x=["Benign", "Malignant"],
                y=list(res.proba),
                marker_color=["seagreen", "indianred"],
                text=[f"{p:.3f}" for p in res.proba],
                textposition="auto",
            ))
            fig.update_layout(height=260, yaxis=dict(range=[0, 1]), margin=dict(t=20, b=20))
            st.plotly_chart(fig, use_container_width=True)
        st.caption("This tool is for demonstration only and not a medical device.")

# ----------------------------
# Backend how-to
# ----------------------------
st.markdown("---")
with st.expander("How to hook up a backend"):
    st.markdown(
        "Point the endpoint to your API (default `/predict`). The API should scale/transform "
        "the vector exactly as your notebook did (e.g. StandardScaler) before calling "
        "`model.predict`. If you used a scikit-learn Pipeline, just call `pipeline.predict` "
        "directly. This repository ships one: `python train.py` then "
        "`uvicorn api:app --port 8000`."
    )
    st.code(
        json.dumps({
            "feature_names": list(FEATURES[:2]) + ["..."],
            "features": [17.99, 10.38, "..."],
            "meta": {"source": "ui-streamlit"},
        }, indent=2),
        language="json",
    )
    st.code('{"prediction": 0, "proba": [0.91, 0.09]}', language="json")

# ----------------------------
# Sidebar: vector preview + session log
# ----------------------------
with st.sidebar.expander("Current vector"):
    st.dataframe(
        pd.DataFrame({"feature": list(FEATURES), "value": [app.values[k] for k in FEATURE_KEYS]}),
        hide_index=True,
        use_container_width=True,
    )
    st.caption("Ready to submit" if app.ready else "Some features are still empty")

st.sidebar.header("🗒️ Session log")
st.sidebar.caption(f"{len(app.log)} events recorded")
st.sidebar.download_button(
    "Download log (JSON)",
    data=json.dumps(app.log, indent=2),
    file_name=f"predictor_session_{pd.Timestamp.now().strftime('%Y%m%d_%H%M%S')}.json",
    mime="application/json",
    use_container_width=True,
)
