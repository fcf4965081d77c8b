import datetime
from unittest.mock import Mock

import pytest
import requests

from error_reporter.config import Config
from error_reporter.gateway import create_app
from error_reporter.service import build_context


@pytest.fixture
def valid_report():
    return {
        "errorMessage": "x is not defined",
        "url": "https://a.test/p",
        "line": 10,
        "column": 3,
        "errorStack": None,
    }


@pytest.fixture
def fake_time():
    """Mutable monotonic clock for the rate limiter."""
    return [0.0]


@pytest.fixture
def unreachable_session():
    session = Mock()
    session.post.side_effect = requests.exceptions.ConnectionError("connection refused")
    return session


@pytest.fixture
def success_response():
    def _make(text="Declare x before using it."):
        response = Mock(ok=True, status_code=200, text="{}")
        response.json.return_value = {
            "candidates": [{"content": {"parts": [{"text": text}]}}]
        }
        return response
    return _make


@pytest.fixture
def make_config(tmp_path):
    def _make(**overrides):
        defaults = {
            "log_dir": str(tmp_path / "logs"),
            "log_filename": "error.log",
            "enrichment_url": "http://enrichment.invalid/v1/generate",
            "enrichment_api_key": "test-key",
        }
        defaults.update(overrides)
        return Config(**defaults)
    return _make


@pytest.fixture
def make_context(make_config, fake_time, unreachable_session):
    def _make(session=None, **overrides):
        return build_context(
            make_config(**overrides),
            time_func=lambda: fake_time[0],
            session=session or unreachable_session,
        )
    return _make


@pytest.fixture
def context(make_context):
    return make_context()


@pytest.fixture
def app(context):
    """Create a Flask test app."""
    application = create_app(context)
    application.config["TESTING"] = True
    return application


@pytest.fixture
def client(app):
    """Create a Flask test client."""
    return app.test_client()


@pytest.fixture
def fixed_now():
    return datetime.datetime(2025, 3, 1, 12, 30, 45, 123456, tzinfo=datetime.timezone.utc)
