"""Shared fixtures for web API tests."""

import pytest
from fastapi.testclient import TestClient

from analysis.analyzer import StyleAnalyzer
from cli.config_models import DigitalMeConfig
from style.refiner import ProfileRefiner
from style.storage import ProfileDirectory
from web.app import app
from web.deps import (
    get_config,
    get_llm_provider,
    get_profile_directory,
    get_refine_limiter,
    get_refiner,
)
from web.rate_limit import SlidingWindowRateLimiter
from web.session_store import TTLStore


@pytest.fixture
def web_config(tmp_path):
    return DigitalMeConfig.from_dict(
        {
            "paths": {
                "profiles_dir": str(tmp_path / "profiles"),
                "log_file": str(tmp_path / "digitalme.log"),
            },
            "retry": {"max_attempts": 1},
        }
    )


@pytest.fixture
def profiles(web_config):
    return ProfileDirectory(web_config.paths.profiles_dir)


@pytest.fixture
def refine_limiter():
    return SlidingWindowRateLimiter(store=TTLStore(), max_requests=10, window_seconds=3600)


@pytest.fixture
def client(web_config, profiles, refine_limiter, mock_provider):
    """TestClient with config, storage, limiter and LLM swapped for test doubles."""
    app.dependency_overrides[get_config] = lambda: web_config
    app.dependency_overrides[get_profile_directory] = lambda: profiles
    app.dependency_overrides[get_refine_limiter] = lambda: refine_limiter
    app.dependency_overrides[get_llm_provider] = lambda: mock_provider
    app.dependency_overrides[get_refiner] = lambda: ProfileRefiner(
        StyleAnalyzer.from_config(mock_provider, web_config)
    )
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def profile_doc():
    """Profile document as the browser client sends it."""
    return {
        "id": "p-1",
        "userId": "alice",
        "version": 2,
        "writing": {
            "tone": "professional",
            "formality": "formal",
            "sentenceLength": "medium",
            "vocabulary": ["clear", "descriptive"],
            "avoidance": ["emojis"],
        },
        "confidence": 0.3,
        "sampleCount": {"emailWords": 800},
    }
