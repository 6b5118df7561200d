"""Dependency injection for FastAPI routes."""

from functools import lru_cache

import structlog

from cli.config import load_config_model
from cli.config_models import DigitalMeConfig
from web.errors import LLMUnavailable
from web.rate_limit import SlidingWindowRateLimiter
from web.session_store import TTLStore

logger = structlog.get_logger()


@lru_cache
def get_config() -> DigitalMeConfig:
    """Load shared config from the standard config.yaml locations."""
    return load_config_model()


def get_profile_directory():
    from style.storage import ProfileDirectory

    return ProfileDirectory(get_config().paths.profiles_dir)


@lru_cache
def get_refine_limiter() -> SlidingWindowRateLimiter:
    config = get_config()
    return SlidingWindowRateLimiter(
        store=TTLStore(),
        max_requests=config.refine.rate_limit_requests,
        window_seconds=config.refine.rate_limit_window_seconds,
    )


@lru_cache
def get_llm_provider():
    """Shared LLM provider; 503 when no API key is configured."""
    from llm import LLMError, create_llm_provider

    config = get_config()
    try:
        return create_llm_provider(
            provider=config.llm.provider,
            api_key=config.llm.api_key or None,
            model=config.llm.model,
        )
    except LLMError as e:
        logger.warning("web.llm_unavailable", error=str(e))
        raise LLMUnavailable("LLM service is not configured") from e


def get_refiner():
    """ProfileRefiner backed by the LLM analyzer.

    Without an LLM, refinement still runs on the default guess.
    """
    from analysis.analyzer import StyleAnalyzer
    from style.refiner import ProfileRefiner

    try:
        provider = get_llm_provider()
    except LLMUnavailable:
        return ProfileRefiner(analyzer=None)
    return ProfileRefiner(analyzer=StyleAnalyzer.from_config(provider, get_config()))
