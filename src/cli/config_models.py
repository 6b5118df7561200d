"""Pydantic configuration models for DigitalMe."""

import os
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, field_validator, model_validator

VALID_LLM_PROVIDERS = {"auto", "gemini"}


class LLMConfig(BaseModel):
    """LLM provider configuration."""

    provider: str = "gemini"
    model: Optional[str] = None  # None = use provider default
    api_key: Optional[str] = None
    max_tokens: int = 2000
    analysis_max_tokens: int = 1024

    @field_validator("provider")
    @classmethod
    def validate_provider(cls, v: str) -> str:
        if v not in VALID_LLM_PROVIDERS:
            raise ValueError(f"Invalid LLM provider: {v}. Must be one of {VALID_LLM_PROVIDERS}")
        return v


class PathsConfig(BaseModel):
    """File paths configuration."""

    profiles_dir: Path = Path("~/digitalme/profiles")
    log_file: Path = Path("~/digitalme/digitalme.log")

    @model_validator(mode="after")
    def expand_paths(self):
        """Expand ~ in all paths."""
        self.profiles_dir = self.profiles_dir.expanduser()
        self.log_file = self.log_file.expanduser()
        return self


class RefineConfig(BaseModel):
    """Refinement request limits and rate limiting."""

    max_messages: int = 50
    max_message_chars: int = 5000
    max_total_chars: int = 50000
    rate_limit_requests: int = 10
    rate_limit_window_seconds: int = 3600

    @model_validator(mode="after")
    def validate_limits(self):
        if self.max_messages < 1:
            raise ValueError("max_messages must be at least 1")
        if self.max_message_chars > self.max_total_chars:
            raise ValueError("max_message_chars cannot exceed max_total_chars")
        if self.rate_limit_requests < 1 or self.rate_limit_window_seconds < 1:
            raise ValueError("Rate limit requests and window must be positive")
        return self


class MergeConfig(BaseModel):
    """Multi-source merge request limits."""

    max_sources: int = 20


class AnalysisConfig(BaseModel):
    """Chunked LLM analysis settings."""

    chunk_words: int = 2000
    max_concurrent_chunks: int = 4
    requests_per_second: float = 2.0
    burst: int = 5
    anonymize: bool = True

    @field_validator("chunk_words", "max_concurrent_chunks", "burst")
    @classmethod
    def validate_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError(f"Must be positive, got {v}")
        return v


class RetryConfig(BaseModel):
    """Retry/backoff configuration."""

    max_attempts: int = 3
    min_wait: float = 2.0
    max_wait: float = 10.0
    llm_max_wait: float = 30.0


VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = "INFO"
    file_level: str = "DEBUG"
    json_mode: bool = False

    @field_validator("level", "file_level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        v_upper = v.upper()
        if v_upper not in VALID_LOG_LEVELS:
            raise ValueError(f"Invalid log level: {v}. Must be one of {VALID_LOG_LEVELS}")
        return v_upper


class DigitalMeConfig(BaseModel):
    """Main configuration model."""

    llm: LLMConfig = Field(default_factory=LLMConfig)
    paths: PathsConfig = Field(default_factory=PathsConfig)
    merge: MergeConfig = Field(default_factory=MergeConfig)
    refine: RefineConfig = Field(default_factory=RefineConfig)
    analysis: AnalysisConfig = Field(default_factory=AnalysisConfig)
    retry: RetryConfig = Field(default_factory=RetryConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @model_validator(mode="after")
    def expand_env_vars(self):
        """Expand ${VAR} patterns in API keys."""
        if self.llm.api_key:
            key = self.llm.api_key
            if key.startswith("${") and key.endswith("}"):
                env_var = key[2:-1]
                self.llm.api_key = os.getenv(env_var, "")
        return self

    @classmethod
    def from_dict(cls, data: dict) -> "DigitalMeConfig":
        return cls.model_validate(data)

    def to_dict(self) -> dict:
        return self.model_dump(mode="python")
