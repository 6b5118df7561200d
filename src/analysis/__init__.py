"""Writing style analysis: LLM analyzer, heuristics and text preprocessing."""

from .analyzer import (
    AnalysisFailed,
    ParsedStyle,
    StyleAnalyzer,
    StyleParseError,
    parse_style_response,
)
from .heuristics import analyze_text_sample, validate_text_sample
from .prompts import build_analysis_prompt, build_meta_prompt

__all__ = [
    "AnalysisFailed",
    "ParsedStyle",
    "StyleAnalyzer",
    "StyleParseError",
    "parse_style_response",
    "analyze_text_sample",
    "validate_text_sample",
    "build_analysis_prompt",
    "build_meta_prompt",
]
