from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

ScoreBand = Literal["high", "medium", "low"]


class TextUpdateRequest(BaseModel):
    text: str = Field(default="", max_length=100000)


class SignInRequest(BaseModel):
    id_token: str = Field(min_length=1, max_length=8192)


class ErrorView(BaseModel):
    kind: str
    message: str


class SessionView(BaseModel):
    uid: str
    display_name: str | None = None
    email: str | None = None
    photo_url: str | None = None
    label: str


class AuthStateView(BaseModel):
    session: SessionView | None = None
    # Only returned by sign-in; sent back as X-Session-Token on every request.
    session_token: str | None = None
    error: ErrorView | None = None


class AuthConfigView(BaseModel):
    enabled: bool
    firebase: dict[str, str | None]


class ResultView(BaseModel):
    match_score: int | float
    band: ScoreBand
    color: str
    ring_offset: float
    summary: str
    strengths: list[str] = Field(default_factory=list)
    improvements: list[str] = Field(default_factory=list)
    missing_keywords: list[str] = Field(default_factory=list)


class PlaceholderView(BaseModel):
    title: str = "Ready to Analyze"
    message: str = "Upload your documents to unlock AI insights."


class ResumeView(BaseModel):
    text: str = ""
    file_name: str = ""


class WorkspaceView(BaseModel):
    session: SessionView | None = None
    resume: ResumeView = Field(default_factory=ResumeView)
    job_description: str = ""
    loading: bool = False
    error: ErrorView | None = None
    result: ResultView | None = None
    placeholder: PlaceholderView | None = None
