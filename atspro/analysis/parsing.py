from __future__ import annotations

import re
from typing import Any

from pydantic import ValidationError

from atspro.core.errors import ANALYSIS_FAILED_MESSAGE, ResponseParseError
from atspro.schemas.analysis import AnalysisResult, GeminiResponse

_FENCE_RE = re.compile(r"```[A-Za-z0-9_+-]*")


def strip_code_fences(text: str) -> str:
    """Drop every Markdown fence marker, tagged or not, and trim the rest."""
    return _FENCE_RE.sub("", text or "").strip()


def extract_candidate_text(envelope: Any) -> str:
    try:
        text = GeminiResponse.model_validate(envelope).first_text()
    except ValidationError as exc:
        raise ResponseParseError(ANALYSIS_FAILED_MESSAGE) from exc
    if not text:
        raise ResponseParseError(ANALYSIS_FAILED_MESSAGE)
    return text


def parse_analysis_result(raw_text: str) -> AnalysisResult:
    cleaned = strip_code_fences(raw_text)
    try:
        return AnalysisResult.model_validate_json(cleaned)
    except ValidationError as exc:
        raise ResponseParseError(ANALYSIS_FAILED_MESSAGE) from exc
