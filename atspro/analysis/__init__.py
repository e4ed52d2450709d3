from .client import GeminiAnalysisClient
from .parsing import extract_candidate_text, parse_analysis_result, strip_code_fences
from .prompts import SYSTEM_PROMPT, build_request_body, build_user_prompt

__all__ = [
    "GeminiAnalysisClient",
    "SYSTEM_PROMPT",
    "build_request_body",
    "build_user_prompt",
    "extract_candidate_text",
    "parse_analysis_result",
    "strip_code_fences",
]
