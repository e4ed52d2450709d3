from __future__ import annotations

from typing import Any

SYSTEM_PROMPT = (
    "You are an expert AI ATS. Compare the Resume to the Job Description. "
    "Return strictly valid JSON: "
    '{"matchScore": number, "summary": "string", "missingKeywords": [], "strengths": [], "improvements": []}'
)


def build_user_prompt(resume_text: str, job_description: str) -> str:
    return f"RESUME:\n{resume_text}\n\nJOB DESCRIPTION:\n{job_description}"


def build_request_body(resume_text: str, job_description: str) -> dict[str, Any]:
    return {
        "contents": [{"parts": [{"text": build_user_prompt(resume_text, job_description)}]}],
        "systemInstruction": {"parts": [{"text": SYSTEM_PROMPT}]},
    }
