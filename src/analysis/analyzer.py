"""LLM-backed writing style analysis.

The model's reply is treated as untrusted text: ``parse_style_response``
returns either a ``ParsedStyle`` or a ``StyleParseError`` and never raises.
"""

import asyncio
import json
import re
from dataclasses import dataclass
from typing import Optional, Union

import structlog

from cli.rate_limit import TokenBucketRateLimiter
from cli.retry import llm_retry, retry_from_config
from llm import LLMError, LLMProvider, LLMRateLimitError
from observability import metrics
from shared_types import SourceType
from style.merger import merge_writing_styles
from style.models import MergeResult, SourceSample, WritingStyle
from style.normalize import normalize_writing_style
from style.refiner import DEFAULT_GUESS

from .preprocess import DEFAULT_CHUNK_WORDS, anonymize_text, chunk_text, count_words
from .prompts import PromptTemplates, build_analysis_prompt

logger = structlog.get_logger()

STYLE_FIELDS = ("tone", "formality", "sentenceLength", "sentence_length", "vocabulary", "avoidance")
_JSON_OBJECT = re.compile(r"\{[\s\S]*\}")


@dataclass(frozen=True)
class ParsedStyle:
    style: WritingStyle


@dataclass(frozen=True)
class StyleParseError:
    reason: str
    raw: str = ""


ParseResult = Union[ParsedStyle, StyleParseError]


class AnalysisFailed(Exception):
    """The LLM call or its response could not produce a style."""


def _strip_fences(raw: str) -> str:
    text = raw.strip()
    if text.startswith("```"):
        text = text.split("\n", 1)[1] if "\n" in text else ""
        if text.rstrip().endswith("```"):
            text = text.rstrip()[:-3]
    return text.strip()


def parse_style_response(raw: Optional[str]) -> ParseResult:
    """Parse an LLM reply into a normalized WritingStyle, without raising."""
    if not isinstance(raw, str) or not raw.strip():
        return StyleParseError("empty response")

    text = _strip_fences(raw)
    try:
        data = json.loads(text)
    except json.JSONDecodeError:
        match = _JSON_OBJECT.search(text)
        if not match:
            return StyleParseError("no JSON object in response", raw[:200])
        try:
            data = json.loads(match.group(0))
        except json.JSONDecodeError as e:
            return StyleParseError(f"invalid JSON: {e.msg}", raw[:200])

    if not isinstance(data, dict):
        return StyleParseError(f"expected a JSON object, got {type(data).__name__}", raw[:200])
    if not any(key in data for key in STYLE_FIELDS):
        return StyleParseError("no style fields in response", raw[:200])
    return ParsedStyle(normalize_writing_style(data))


class StyleAnalyzer:
    """Extracts a WritingStyle from text through an LLM provider."""

    def __init__(
        self,
        provider: LLMProvider,
        max_tokens: int = 1024,
        chunk_words: int = DEFAULT_CHUNK_WORDS,
        max_concurrent: int = 4,
        rate_limiter: Optional[TokenBucketRateLimiter] = None,
        retry_attempts: int = 3,
        anonymize: bool = True,
        retry=None,
    ):
        self.provider = provider
        self.max_tokens = max_tokens
        self.chunk_words = chunk_words
        self.max_concurrent = max_concurrent
        self.rate_limiter = rate_limiter or TokenBucketRateLimiter()
        self.anonymize = anonymize
        retry = retry or llm_retry(max_attempts=retry_attempts, exceptions=(LLMRateLimitError,))
        self._generate = retry(self._generate_once)

    @classmethod
    def from_config(cls, provider: LLMProvider, config) -> "StyleAnalyzer":
        """Build an analyzer from a DigitalMeConfig."""
        return cls(
            provider,
            max_tokens=config.llm.analysis_max_tokens,
            chunk_words=config.analysis.chunk_words,
            max_concurrent=config.analysis.max_concurrent_chunks,
            rate_limiter=TokenBucketRateLimiter(
                requests_per_second=config.analysis.requests_per_second,
                burst=config.analysis.burst,
            ),
            retry=retry_from_config(config, exceptions=(LLMRateLimitError,)),
            anonymize=config.analysis.anonymize,
        )

    def _generate_once(self, prompt: str) -> str:
        return self.provider.generate(
            [{"role": "user", "content": prompt}],
            system=PromptTemplates.STYLE_ANALYSIS_SYSTEM,
            max_tokens=self.max_tokens,
            json_mode=True,
        )

    def analyze_strict(self, text: str) -> WritingStyle:
        """Like ``analyze`` but raises ``AnalysisFailed`` instead of defaulting."""
        if not text or not text.strip():
            raise AnalysisFailed("no text to analyze")
        if self.anonymize:
            text = anonymize_text(text)
        try:
            raw = self._generate(build_analysis_prompt(text))
        except LLMError as e:
            raise AnalysisFailed(str(e)) from e

        result = parse_style_response(raw)
        if isinstance(result, StyleParseError):
            raise AnalysisFailed(result.reason)
        return result.style

    def analyze(self, text: str) -> WritingStyle:
        """Analyze ``text``. Any failure yields the default guess; never raises."""
        try:
            return self.analyze_strict(text)
        except AnalysisFailed as e:
            logger.warning("analysis.failed", error=str(e), words=count_words(text))
            return DEFAULT_GUESS

    async def _analyze_chunk(self, chunk: str, semaphore: asyncio.Semaphore) -> WritingStyle:
        async with semaphore:
            await self.rate_limiter.acquire()
            return await asyncio.to_thread(self.analyze_strict, chunk)

    async def analyze_chunks(
        self, text: str, source_type: str = SourceType.TEXT
    ) -> MergeResult:
        """Analyze a long text chunk by chunk and merge the per-chunk styles.

        Chunks are analyzed concurrently. A failed chunk contributes the
        default guess instead of failing the whole analysis.
        """
        chunks = chunk_text(text, self.chunk_words)
        if not chunks:
            return merge_writing_styles([])

        semaphore = asyncio.Semaphore(self.max_concurrent)
        results = await asyncio.gather(
            *(self._analyze_chunk(chunk, semaphore) for chunk in chunks),
            return_exceptions=True,
        )

        samples = []
        for i, (chunk, result) in enumerate(zip(chunks, results)):
            if isinstance(result, BaseException):
                metrics.counter("analysis.chunk_failures")
                logger.warning("analysis.chunk_failed", chunk=i, error=str(result))
                result = DEFAULT_GUESS
            samples.append(
                SourceSample(
                    type=source_type,
                    writing_style=result,
                    word_count=count_words(chunk),
                    text=chunk,
                )
            )

        logger.info("analysis.chunks_complete", chunks=len(chunks), source_type=str(source_type))
        return merge_writing_styles(samples)

    async def analyze_to_sample(self, text: str, source_type: str = SourceType.TEXT) -> SourceSample:
        """Build a source sample for ``text`` with its merged, chunk-level style."""
        merged = await self.analyze_chunks(text, source_type)
        return SourceSample(
            type=source_type,
            writing_style=merged.writing_style,
            word_count=count_words(text),
            text=text,
        )
