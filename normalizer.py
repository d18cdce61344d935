"""Turn user text into a strictly ordered 30-value feature vector.

Two entry modes are supported:

- per-field edits, where each of the 30 inputs is parsed on its own and an
  invalid edit never replaces the stored value;
- bulk paste of a whole row, either as a JSON array (``[17.99, 10.38, ...]``)
  or as a CSV-like line, optionally preceded by a header line.

A vector is a plain ``dict`` of feature key -> float or ``None`` (unset).
"""
import json
import math
import re
from typing import Dict, List, Optional

import numpy as np

from features import FEATURE_KEYS, N_FEATURES, feature_range

FeatureVector = Dict[str, Optional[float]]

BULK_PASTE_HINT = f"Paste {N_FEATURES} numeric values as JSON array or single CSV row."

_SEPARATORS = re.compile(r"[,;\s]+")


class InvalidNumberError(ValueError):
    """Raised when a field does not hold a finite number."""


class BulkPasteError(ValueError):
    """Raised when a pasted block is neither a JSON array nor a CSV row of 30 numbers."""


class IncompleteVectorError(ValueError):
    """Raised when a vector with unset entries is requested for submission."""


# ----------------------------
# Single values
# ----------------------------
def parse_number(raw: str) -> Optional[float]:
    """Parse one field. Blank text means unset; anything else must be a finite number."""
    text = (raw or "").strip()
    if text == "":
        return None
    # float() accepts digit separators, a form no user types into a numeric field
    if "_" in text:
        raise InvalidNumberError(f"Not a number: {raw!r}")
    try:
        value = float(text)
    except ValueError as exc:
        raise InvalidNumberError(f"Not a number: {raw!r}") from exc
    if not math.isfinite(value):
        raise InvalidNumberError(f"Not a finite number: {raw!r}")
    return value


def _coerce_element(item) -> float:
    # JSON arrays may carry numbers or numeric strings; true/false/null are not numbers here
    if isinstance(item, bool) or item is None:
        raise InvalidNumberError(f"Not a number: {item!r}")
    if isinstance(item, (int, float)):
        try:
            value = float(item)
        except OverflowError as exc:
            raise InvalidNumberError(f"Number out of range: {str(item)[:20]}...") from exc
        if not math.isfinite(value):
            raise InvalidNumberError(f"Not a finite number: {item!r}")
        return value
    if isinstance(item, str):
        value = parse_number(item)
        if value is None:
            raise InvalidNumberError("Empty value")
        return value
    raise InvalidNumberError(f"Not a number: {item!r}")


def format_value(value: Optional[float]) -> str:
    """Text shown in an input field for a stored value."""
    if value is None:
        return ""
    text = repr(float(value))
    return text[:-2] if text.endswith(".0") else text


# ----------------------------
# Vectors
# ----------------------------
def empty_vector() -> FeatureVector:
    return {k: None for k in FEATURE_KEYS}


def _from_sequence(values: List[float]) -> FeatureVector:
    return {k: v for k, v in zip(FEATURE_KEYS, values)}


def update_value(values: FeatureVector, key: str, raw: str) -> bool:
    """Store ``raw`` under ``key`` if it parses; otherwise keep the prior value.

    Returns ``True`` when the vector was updated.
    """
    if key not in values:
        raise KeyError(key)
    try:
        parsed = parse_number(raw)
    except InvalidNumberError:
        return False
    values[key] = parsed
    return True


def is_ready(values: FeatureVector) -> bool:
    """True iff all 30 positions hold a finite number."""
    for k in FEATURE_KEYS:
        v = values.get(k)
        if v is None or not math.isfinite(v):
            return False
    return True


def ordered_vector(values: FeatureVector) -> List[float]:
    """Snapshot of the vector in schema order, ready to be sent."""
    if not is_ready(values):
        missing = [k for k in FEATURE_KEYS if values.get(k) is None]
        raise IncompleteVectorError(
            f"{len(missing)} of {N_FEATURES} features are not set: {', '.join(missing[:5])}"
            + (" ..." if len(missing) > 5 else "")
        )
    return [float(values[k]) for k in FEATURE_KEYS]


def fill_random(rng: Optional[np.random.Generator] = None) -> FeatureVector:
    """Draw a plausible value for every feature (demo helper)."""
    rng = rng if rng is not None else np.random.default_rng()
    out: FeatureVector = {}
    for k in FEATURE_KEYS:
        lo, hi = feature_range(k)
        out[k] = round(float(rng.uniform(lo, hi)), 4)
    return out


# ----------------------------
# Bulk paste
# ----------------------------
def _parse_json_array(text: str) -> List[float]:
    try:
        arr = json.loads(text)
    except ValueError as exc:
        raise BulkPasteError(f"Invalid JSON array: {exc}") from exc
    if not isinstance(arr, list) or len(arr) != N_FEATURES:
        raise BulkPasteError(BULK_PASTE_HINT)
    try:
        return [_coerce_element(x) for x in arr]
    except InvalidNumberError as exc:
        raise BulkPasteError(BULK_PASTE_HINT) from exc


def _parse_csv_row(text: str) -> List[float]:
    lines = [ln for ln in text.splitlines() if ln.strip()]
    if not lines:
        raise BulkPasteError(BULK_PASTE_HINT)
    # a header line may sit above the data; only the last row counts
    parts = [p for p in _SEPARATORS.split(lines[-1]) if p]
    if len(parts) != N_FEATURES:
        raise BulkPasteError(BULK_PASTE_HINT)
    try:
        return [_coerce_element(p) for p in parts]
    except InvalidNumberError as exc:
        raise BulkPasteError(BULK_PASTE_HINT) from exc


def parse_bulk_paste(text: str) -> FeatureVector:
    """Parse a pasted JSON array or CSV row into a new vector.

    Raises ``BulkPasteError`` with a readable reason when the text has the
    wrong shape; callers keep their current vector in that case.
    """
    t = (text or "").strip()
    if t.startswith("["):
        return _from_sequence(_parse_json_array(t))
    return _from_sequence(_parse_csv_row(t))
