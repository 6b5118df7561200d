"""Style profile API routes: merge, refine, load/save/reset."""

import asyncio

import structlog
from fastapi import APIRouter, Depends, Request, Response
from pydantic import ValidationError

from cli.config_models import DigitalMeConfig
from style.merger import build_style_profile
from style.models import StyleProfile
from style.refiner import ProfileRefiner
from web.deps import get_config, get_profile_directory, get_refine_limiter, get_refiner
from web.errors import NotFound, RequestValidationFailed
from web.models import DeleteResponse, MergeRequest, RefineRequest, RefineResponse
from web.rate_limit import SlidingWindowRateLimiter

logger = structlog.get_logger()

router = APIRouter(prefix="/api/profile", tags=["profile"])


def _parse_profile(doc: dict) -> StyleProfile:
    try:
        return StyleProfile.model_validate(doc)
    except ValidationError as e:
        raise RequestValidationFailed(f"Invalid profile: {e.error_count()} error(s)") from e


def validate_refine_request(body: RefineRequest, config: DigitalMeConfig) -> None:
    """Reject refine requests outside the message count and size limits."""
    limits = config.refine
    messages = body.new_messages
    if not body.current_profile:
        raise RequestValidationFailed("currentProfile is required")
    if not messages:
        raise RequestValidationFailed("newMessages must contain at least one message")
    if len(messages) > limits.max_messages:
        raise RequestValidationFailed(
            f"Too many messages: {len(messages)} (max {limits.max_messages})"
        )
    for i, message in enumerate(messages):
        if len(message) > limits.max_message_chars:
            raise RequestValidationFailed(
                f"Message {i} is too long ({len(message)} chars, max {limits.max_message_chars})"
            )
    total = sum(len(m) for m in messages)
    if total > limits.max_total_chars:
        raise RequestValidationFailed(
            f"Messages too large: {total} chars (max {limits.max_total_chars})"
        )


def _rate_limit_key(request: Request, profile_doc: dict) -> str:
    user_id = profile_doc.get("userId") or profile_doc.get("user_id")
    if isinstance(user_id, str) and user_id:
        return f"user:{user_id}"
    host = request.client.host if request.client else "unknown"
    return f"ip:{host}"


@router.post("/merge")
async def merge_profile(
    body: MergeRequest,
    config: DigitalMeConfig = Depends(get_config),
    profiles=Depends(get_profile_directory),
):
    if len(body.sources) > config.merge.max_sources:
        raise RequestValidationFailed(
            f"Too many sources: {len(body.sources)} (max {config.merge.max_sources})"
        )

    current = _parse_profile(body.current_profile) if body.current_profile else None
    storage = profiles.for_user(body.user_id) if body.user_id else None
    if current is None and storage is not None:
        current = storage.load()

    profile = build_style_profile(
        body.sources,
        user_id=body.user_id or (current.user_id if current else "default"),
        current=current,
    )
    if storage is not None:
        profile = storage.save(profile)
    return profile.to_document()


@router.post("/refine", response_model=RefineResponse, response_model_by_alias=True)
async def refine_profile(
    body: RefineRequest,
    request: Request,
    response: Response,
    config: DigitalMeConfig = Depends(get_config),
    limiter: SlidingWindowRateLimiter = Depends(get_refine_limiter),
    refiner: ProfileRefiner = Depends(get_refiner),
    profiles=Depends(get_profile_directory),
):
    validate_refine_request(body, config)
    key = _rate_limit_key(request, body.current_profile)
    limiter.check(key)
    response.headers["X-RateLimit-Remaining"] = str(limiter.remaining(key))
    current = _parse_profile(body.current_profile)

    # The analyzer makes a blocking LLM call
    result = await asyncio.to_thread(refiner.refine, current, body.new_messages)

    if body.persist:
        profiles.for_user(result.updated_profile.user_id).save(result.updated_profile)
    return result.to_document()


@router.get("/{user_id}")
async def get_profile(user_id: str, profiles=Depends(get_profile_directory)):
    profile = profiles.for_user(user_id).load()
    if not profile:
        raise NotFound(f"No profile for user {user_id}")
    return profile.to_document()


@router.put("/{user_id}")
async def save_profile(user_id: str, doc: dict, profiles=Depends(get_profile_directory)):
    profile = _parse_profile({**doc, "userId": user_id})
    stored = profiles.for_user(user_id).save(profile)
    return stored.to_document()


@router.delete("/{user_id}", response_model=DeleteResponse, response_model_by_alias=True)
async def reset_profile(user_id: str, profiles=Depends(get_profile_directory)):
    deleted = profiles.for_user(user_id).reset()
    logger.info("profile.reset_requested", user_id=user_id, deleted=deleted)
    return DeleteResponse(deleted=deleted, user_id=user_id)
