"""Pydantic request/response schemas for the web API.

Bodies use camelCase keys, matching the browser client's profile documents.
"""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class APIModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# --- Profile ---


class MergeRequest(APIModel):
    sources: list[Any] = Field(default_factory=list)
    user_id: Optional[str] = Field(None, max_length=200)
    current_profile: Optional[dict[str, Any]] = None


class RefineRequest(APIModel):
    current_profile: dict[str, Any]
    new_messages: list[str]
    persist: bool = False


class RefineResponse(APIModel):
    updated_profile: dict[str, Any]
    delta_report: dict[str, Any]


class DeleteResponse(APIModel):
    deleted: bool
    user_id: str


# --- Analysis ---


class AnalyzeTextRequest(APIModel):
    text: str = Field(..., max_length=100_000)


# --- Generation ---


class GenerateRequest(APIModel):
    prompt: str = Field(..., min_length=1, max_length=10_000)
    style_profile: dict[str, Any]


class GenerateResponse(APIModel):
    text: str
