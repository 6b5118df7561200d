"""Text sample analysis API routes."""

import structlog
from fastapi import APIRouter

from analysis.heuristics import analyze_text_sample, validate_text_sample
from web.errors import RequestValidationFailed
from web.models import AnalyzeTextRequest

logger = structlog.get_logger()

router = APIRouter(prefix="/api/analyze", tags=["analyze"])


@router.post("/text")
async def analyze_text(body: AnalyzeTextRequest):
    problem = validate_text_sample(body.text)
    if problem:
        raise RequestValidationFailed(problem)
    sample = analyze_text_sample(body.text)
    logger.info("analyze.text", words=sample.word_count)
    return sample.model_dump(by_alias=True, mode="json", exclude_none=True)
