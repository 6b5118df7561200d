"""LLM provider factory."""

import os

from .base import LLMError, LLMProvider

_PROVIDER_ENV_KEYS = {
    "gemini": ("GOOGLE_API_KEY", "GEMINI_API_KEY"),
}


def resolve_api_key(provider: str = "gemini") -> str | None:
    """First non-empty API key env var for ``provider``."""
    for env_var in _PROVIDER_ENV_KEYS.get(provider, ()):
        value = os.getenv(env_var)
        if value:
            return value
    return None


def create_llm_provider(
    provider: str | None = None,
    api_key: str | None = None,
    model: str | None = None,
    client=None,
) -> LLMProvider:
    """Create an LLM provider instance.

    Args:
        provider: "gemini", "auto", or None (auto)
        api_key: Explicit API key (overrides env vars)
        model: Model name (None = provider default)
        client: Pre-built SDK client for testing/DI

    Returns:
        LLMProvider instance
    """
    resolved = provider or "auto"
    if resolved == "auto":
        resolved = "gemini"

    if resolved not in _PROVIDER_ENV_KEYS:
        raise LLMError(f"Unknown provider: {resolved}. Use: gemini")

    if not api_key and not client:
        api_key = resolve_api_key(resolved)

    from .providers.gemini import GeminiProvider

    return GeminiProvider(api_key=api_key, model=model, client=client)
