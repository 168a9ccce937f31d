"""
Shared test configuration and fixtures for the shift timeline backend.
"""
import pytest
from application import create_app
from timeline.layout import Interval


@pytest.fixture
def app():
    """Create Flask application for testing."""
    app = create_app({"TESTING": True})
    return app


@pytest.fixture
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture
def chain_intervals():
    """A overlaps B, B overlaps C, A and C only touch."""
    return [
        Interval("A", 0, 60),
        Interval("B", 30, 90),
        Interval("C", 60, 120),
    ]


@pytest.fixture
def sample_shifts():
    """Shift records for 2024-05-10 in the backend's record shape."""
    return [
        {
            "id": "shift-open",
            "type": "shift",
            "title": "Alice",
            "payload": {"assignee": "Alice"},
            "content": "Open the store",
            "starts_at": "2024-05-10T08:00:00",
            "ends_at": "2024-05-10T15:00:00",
        },
        {
            "id": "shift-mid",
            "type": "shift",
            "title": "Bob",
            "payload": {"assignee": "Bob"},
            "content": None,
            "starts_at": "2024-05-10T12:00:00",
            "ends_at": "2024-05-10T18:00:00",
        },
        {
            "id": "shift-close",
            "type": "shift",
            "title": None,
            "payload": {},
            "content": None,
            "starts_at": "2024-05-10T18:00:00",
            "ends_at": "2024-05-10T23:00:00",
        },
    ]
