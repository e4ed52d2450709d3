from __future__ import annotations

from atspro.core.errors import OperationError
from atspro.identity.gate import Session
from atspro.schemas.analysis import AnalysisResult
from atspro.schemas.workspace import (
    ErrorView,
    PlaceholderView,
    ResultView,
    ResumeView,
    ScoreBand,
    SessionView,
    WorkspaceView,
)
from atspro.services.workspace_service import AppState

RING_CIRCUMFERENCE = 351

_BAND_COLORS: dict[ScoreBand, str] = {
    "high": "#22c55e",
    "medium": "#eab308",
    "low": "#ef4444",
}


def score_band(score: float) -> ScoreBand:
    if score > 75:
        return "high"
    if score > 50:
        return "medium"
    return "low"


def score_ring_offset(score: float) -> float:
    return RING_CIRCUMFERENCE - (RING_CIRCUMFERENCE * score) / 100


def present_session(session: Session | None) -> SessionView | None:
    if session is None:
        return None
    return SessionView(
        uid=session.uid,
        display_name=session.display_name,
        email=session.email,
        photo_url=session.photo_url,
        label=session.label,
    )


def present_error(error: OperationError | None) -> ErrorView | None:
    if error is None:
        return None
    return ErrorView(kind=error.kind, message=error.message)


def present_result(result: AnalysisResult) -> ResultView:
    band = score_band(result.match_score)
    return ResultView(
        match_score=result.match_score,
        band=band,
        color=_BAND_COLORS[band],
        ring_offset=score_ring_offset(result.match_score),
        summary=result.summary,
        strengths=list(result.strengths),
        improvements=list(result.improvements),
        missing_keywords=list(result.missing_keywords),
    )


def present(state: AppState) -> WorkspaceView:
    result = present_result(state.result) if state.result is not None else None
    return WorkspaceView(
        session=present_session(state.session),
        resume=ResumeView(text=state.resume_text, file_name=state.resume_file_name),
        job_description=state.job_description,
        loading=state.loading,
        error=present_error(state.error),
        result=result,
        placeholder=None if result is not None else PlaceholderView(),
    )
