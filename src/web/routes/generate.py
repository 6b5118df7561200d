"""Style-conditioned text generation route."""

import asyncio

import structlog
from fastapi import APIRouter, Depends
from pydantic import ValidationError

from analysis.prompts import build_meta_prompt
from cli.config_models import DigitalMeConfig
from llm import LLMError, LLMRateLimitError
from style.models import StyleProfile
from web.deps import get_config, get_llm_provider
from web.errors import RequestValidationFailed, UpstreamLLMError
from web.models import GenerateRequest, GenerateResponse

logger = structlog.get_logger()

router = APIRouter(prefix="/api", tags=["generate"])


@router.post("/generate", response_model=GenerateResponse)
async def generate(
    body: GenerateRequest,
    config: DigitalMeConfig = Depends(get_config),
    provider=Depends(get_llm_provider),
):
    try:
        profile = StyleProfile.model_validate(body.style_profile)
    except ValidationError as e:
        raise RequestValidationFailed(f"Invalid styleProfile: {e.error_count()} error(s)") from e

    meta_prompt = build_meta_prompt(body.prompt, profile)
    try:
        text = await asyncio.to_thread(
            provider.generate,
            [{"role": "user", "content": meta_prompt}],
            None,
            config.llm.max_tokens,
        )
    except LLMRateLimitError as e:
        logger.warning("generate.rate_limited", error=str(e))
        raise UpstreamLLMError("AI service is rate limited, try again shortly", retryable=True)
    except LLMError as e:
        logger.error("generate.failed", error=str(e))
        raise UpstreamLLMError("Failed to generate response from AI service")

    return GenerateResponse(text=text)
