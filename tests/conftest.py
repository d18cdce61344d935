import pytest
import requests

from features import FEATURE_KEYS

# First row of the scikit-learn breast cancer dataset
SAMPLE_ROW = [
    17.99, 10.38, 122.8, 1001.0, 0.1184, 0.2776, 0.3001, 0.1471, 0.2419, 0.07871,
    1.095, 0.9053, 8.589, 153.4, 0.006399, 0.04904, 0.05373, 0.01587, 0.03003, 0.006193,
    25.38, 17.33, 184.6, 2019.0, 0.1622, 0.6656, 0.7119, 0.2654, 0.4601, 0.1189,
]


class FakeResponse:
    """Only what the client reads; `ok` is left out so it cannot mask the status check."""

    def __init__(self, status_code=200, payload=None, reason="OK", text=None):
        self.status_code = status_code
        self.reason = reason
        self._payload = payload
        self._text = text

    def json(self):
        if self._text is not None:
            raise requests.exceptions.JSONDecodeError("Expecting value", self._text, 0)
        return self._payload


class FakeSession:
    """Records every POST and answers with a canned response (or raises)."""

    def __init__(self, response=None, exc=None):
        self.response = response
        self.exc = exc
        self.calls = []

    def post(self, url, **kwargs):
        self.calls.append((url, kwargs))
        if self.exc is not None:
            raise self.exc
        return self.response


@pytest.fixture
def sample_row():
    return list(SAMPLE_ROW)


@pytest.fixture
def sample_vector():
    return dict(zip(FEATURE_KEYS, SAMPLE_ROW))


@pytest.fixture
def make_session():
    def _make(status_code=200, payload=None, reason="OK", text=None, exc=None):
        return FakeSession(FakeResponse(status_code, payload, reason, text), exc=exc)
    return _make
