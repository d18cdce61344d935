"""Single-owner UI state and the transitions that are allowed to change it.

The Streamlit page keeps one ``AppState`` in ``st.session_state`` and only
mutates it through the methods below (edit, paste, fill random, submit,
clear). Every transition appends to ``log`` so a session can be reviewed.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import numpy as np
import pandas as pd

from client import DEFAULT_ENDPOINT, PredictionClient, PredictionError
from normalizer import (
    BulkPasteError,
    FeatureVector,
    empty_vector,
    fill_random,
    is_ready,
    parse_bulk_paste,
    update_value,
)
from schema import PredictionResult


@dataclass
class AppState:
    endpoint: str = DEFAULT_ENDPOINT
    values: FeatureVector = field(default_factory=empty_vector)
    pending: bool = False
    result: Optional[PredictionResult] = None
    error: Optional[str] = None
    log: List[Dict[str, Any]] = field(default_factory=list)

    # ----------------------------
    # Helpers
    # ----------------------------
    @property
    def ready(self) -> bool:
        return is_ready(self.values)

    @property
    def can_submit(self) -> bool:
        return self.ready and not self.pending

    def _record(self, event: str, **details) -> None:
        self.log.append({"timestamp": pd.Timestamp.now().isoformat(), "event": event, **details})

    # ----------------------------
    # Input transitions
    # ----------------------------
    def set_endpoint(self, endpoint: str) -> None:
        self.endpoint = endpoint

    def edit(self, key: str, raw: str) -> bool:
        """Per-field edit; an invalid value leaves the stored one untouched."""
        accepted = update_value(self.values, key, raw)
        if not accepted:
            self._record("edit_rejected", feature=key, raw=raw)
        return accepted

    def paste(self, text: str) -> bool:
        try:
            parsed = parse_bulk_paste(text)
        except BulkPasteError as exc:
            self.error = str(exc)
            self._record("paste_rejected", reason=self.error)
            return False
        self.values = parsed
        self.error = None
        self._record("paste_applied")
        return True

    def fill_random(self, rng: Optional[np.random.Generator] = None) -> None:
        self.values = fill_random(rng)
        self._record("random_fill")

    def clear(self) -> None:
        self.values = empty_vector()
        self.result = None
        self.error = None
        self._record("cleared")

    # ----------------------------
    # Submission
    # ----------------------------
    def submit_start(self) -> FeatureVector:
        """Mark a request as in flight and return the snapshot to send."""
        self.pending = True
        self.result = None
        self.error = None
        self._record("prediction_requested", endpoint=self.endpoint)
        return dict(self.values)

    def submit_success(self, result: PredictionResult) -> None:
        self.pending = False
        self.result = result
        self.error = None
        self._record("prediction_received", label=result.label,
                     proba=list(result.proba) if result.proba else None)

    def submit_failure(self, message: str) -> None:
        # values stay as they are so the user can retry
        self.pending = False
        self.result = None
        self.error = message
        self._record("prediction_failed", reason=message)

    def submit(self, client: PredictionClient) -> Optional[PredictionResult]:
        """Run one full request/response cycle. Returns the result, or None on failure."""
        if self.pending:
            return None
        if not self.ready:
            self.result = None
            self.error = "All features need a numeric value before predicting."
            return None

        snapshot = self.submit_start()
        try:
            result = client.predict(self.endpoint, snapshot)
        except PredictionError as exc:
            self.submit_failure(str(exc) or "Failed to predict")
            return None
        finally:
            self.pending = False
        self.submit_success(result)
        return result
