import pytest
from fastapi.testclient import TestClient

from app import main

STANDUP = {
    "title": "Standup",
    "date": "2025-03-10",
    "time": "09:00",
    "location": "TBD",
    "description": "Daily sync",
}


class FakeExtractor:
    """Stands in for EventExtractor; records the image URLs it was given."""

    def __init__(self, events=None, error=None):
        self.events = events if events is not None else []
        self.error = error
        self.image_urls = []

    def extract_events(self, image_url, today=None):
        self.image_urls.append(image_url)
        if self.error is not None:
            raise self.error
        return self.events


@pytest.fixture
def client():
    return TestClient(main.app)


@pytest.fixture
def use_extractor(monkeypatch):
    def _use(extractor):
        monkeypatch.setattr(main, "_extractor", extractor)
        return extractor

    return _use
