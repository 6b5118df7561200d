"""Prompt templates for style analysis and style-conditioned generation."""

from style.models import StyleProfile, WritingStyle


class PromptTemplates:
    """Prompts sent to the LLM."""

    STYLE_ANALYSIS_SYSTEM = """You analyze writing samples and describe the author's writing style.

Respond ONLY with a JSON object. No preamble, no markdown fences."""

    STYLE_ANALYSIS = """Analyze the following text and extract the author's writing style patterns.

TEXT:
{text}

Respond with a JSON object containing these exact fields:
{{
  "tone": "conversational" | "professional" | "neutral",
  "formality": "casual" | "formal" | "balanced",
  "sentenceLength": "short" | "medium" | "long",
  "vocabulary": ["descriptive", "concise", "straightforward", "relatable", "clear", "direct"],
  "avoidance": ["emojis", "excessive-punctuation", "slang", "none"]
}}

Guidelines:
- tone: "conversational" if friendly/personal, "professional" if business-like, "neutral" if balanced
- formality: "casual" if uses contractions/informal language, "formal" if structured/polished, "balanced" if mixed
- sentenceLength: "short" if avg <15 words, "medium" if 15-25 words, "long" if >25 words
- vocabulary: 2-4 terms that best describe word choice
- avoidance: elements the author avoids (or ["none"])"""

    DIGITAL_TWIN = """You are a digital twin, an AI designed to mirror the user's own writing style and thought process.

INSTRUCTION HIERARCHY (in order of priority):

1. PRIMARY GOAL: Answer the user's request directly and usefully.

2. STYLE ADAPTATION: Reflect the user's style profile.

   WRITING STYLE:
   - Tone: {tone}
   - Formality: {formality}
   - Sentence Length: {sentence_length}
   - Vocabulary: {vocabulary}
   - Avoid: {avoidance}
{coding_section}
3. CONTEXT-AWARENESS: Match the depth and energy of the request.
   - Brief request, brief answer. Detailed request, detailed answer.
   - Casual request, casual answer (within the style above).

USER REQUEST:
{prompt}

Respond naturally, matching both my style and the context of this request."""

    CODING_SECTION = """
   CODING STYLE (when generating code):
{lines}
"""


_CODING_LABELS = (
    ("language", "Language"),
    ("framework", "Framework"),
    ("componentStyle", "Component Style"),
    ("namingConvention", "Naming"),
    ("commentFrequency", "Comments"),
    ("patterns", "Patterns"),
)


def build_analysis_prompt(text: str) -> str:
    return PromptTemplates.STYLE_ANALYSIS.format(text=text)


def _coding_section(coding: dict) -> str:
    lines = []
    for key, label in _CODING_LABELS:
        value = coding.get(key)
        if not value:
            continue
        if isinstance(value, list):
            value = ", ".join(str(v) for v in value)
        lines.append(f"   - {label}: {value}")
    if not lines:
        return ""
    return PromptTemplates.CODING_SECTION.format(lines="\n".join(lines))


def build_meta_prompt(prompt: str, profile: StyleProfile) -> str:
    """Wrap a user request with the writing (and coding) style it should follow."""
    writing: WritingStyle = profile.writing
    return PromptTemplates.DIGITAL_TWIN.format(
        tone=writing.tone,
        formality=writing.formality,
        sentence_length=writing.sentence_length,
        vocabulary=", ".join(writing.vocabulary) or "no preference",
        avoidance=", ".join(writing.avoidance) or "none",
        coding_section=_coding_section(profile.coding or {}),
        prompt=prompt,
    )
