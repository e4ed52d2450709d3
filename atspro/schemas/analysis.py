from __future__ import annotations

from typing import Annotated, Union

from pydantic import BaseModel, ConfigDict, Field

# Integral scores stay integers on the wire.
Score = Union[Annotated[int, Field(ge=0, le=100)], Annotated[float, Field(ge=0, le=100)]]


class AnalysisResult(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    match_score: Score = Field(alias="matchScore")
    summary: str
    missing_keywords: list[str] = Field(alias="missingKeywords")
    strengths: list[str]
    improvements: list[str]

    def as_payload(self) -> dict:
        return self.model_dump(by_alias=True)


class GeminiPart(BaseModel):
    text: str | None = None


class GeminiContent(BaseModel):
    parts: list[GeminiPart] = Field(default_factory=list)


class GeminiCandidate(BaseModel):
    content: GeminiContent | None = None


class GeminiResponse(BaseModel):
    candidates: list[GeminiCandidate] = Field(default_factory=list)

    def first_text(self) -> str | None:
        if not self.candidates:
            return None
        content = self.candidates[0].content
        if content is None or not content.parts:
            return None
        return content.parts[0].text
