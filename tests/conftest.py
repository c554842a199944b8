"""Pytest configuration and shared fixtures."""
import os

import pytest
from fastapi.testclient import TestClient
from langchain_core.language_models.fake_chat_models import FakeListChatModel

import app.main as main_module
from app.main import app
from config.settings import Settings, get_settings


@pytest.fixture
def settings():
    """Return settings with a fake credential, independent of the real environment."""
    s = Settings()
    s.gemini_api_key = "test-key"
    s.gemini_model = "gemini-2.0-flash"
    return s


@pytest.fixture
def api_client(settings):
    """Return a TestClient whose requests see the ``settings`` fixture."""
    app.dependency_overrides[get_settings] = lambda: settings
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def fake_llm(monkeypatch):
    """Replace the Gemini client with a canned-response chat model.

    Returns the list of settings objects ``build_llm`` was called with.
    """
    calls = []

    def _build(settings):
        calls.append(settings)
        return FakeListChatModel(responses=["Hello"])

    monkeypatch.setattr(main_module, "build_llm", _build)
    return calls


@pytest.fixture(scope="session")
def gemini_api_key():
    """Return the real API key from environment, if any."""
    return os.getenv("GEMINI_API_KEY") or os.getenv("GOOGLE_API_KEY")
