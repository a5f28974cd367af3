# tests/conftest.py
import copy
from datetime import datetime, timedelta, timezone

import pytest

NIVEA = {
    "gtin": 4008400109609,
    "title": {"headline": "Nivea Creme"},
    "price": {"price": "2.99"},
    "images": [{"src": "http://x/y.jpg"}],
}


class FakeClient:
    """Records every fetched URL and answers from a canned payload or error."""

    def __init__(self, payload=None, error=None):
        self.payload = payload
        self.error = error
        self.urls = []

    def fetch(self, url):
        self.urls.append(url)
        if self.error is not None:
            raise self.error
        return copy.deepcopy(self.payload)


class FakeClock:
    def __init__(self, start=None):
        self.now = start or datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self):
        return self.now

    def advance(self, **kwargs):
        self.now += timedelta(**kwargs)


@pytest.fixture
def nivea_payload():
    return copy.deepcopy(NIVEA)


@pytest.fixture
def clock():
    return FakeClock()
