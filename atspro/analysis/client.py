from __future__ import annotations

import logging
import time
from typing import Any

import httpx

from atspro.analysis.parsing import extract_candidate_text, parse_analysis_result
from atspro.analysis.prompts import build_request_body
from atspro.core.config import DEFAULT_GEMINI_BASE_URL, DEFAULT_GEMINI_MODEL, Settings
from atspro.core.errors import (
    ANALYSIS_FAILED_MESSAGE,
    MISSING_API_KEY_MESSAGE,
    MISSING_INPUT_MESSAGE,
    ConfigurationError,
    InputValidationError,
    ResponseParseError,
    TransportError,
)
from atspro.schemas.analysis import AnalysisResult

logger = logging.getLogger(__name__)


class GeminiAnalysisClient:
    """Sends one generateContent request per analysis and parses the JSON verdict."""

    def __init__(
        self,
        api_key: str | None,
        *,
        model: str = DEFAULT_GEMINI_MODEL,
        base_url: str = DEFAULT_GEMINI_BASE_URL,
        timeout_s: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._api_key = (api_key or "").strip()
        self._model = model
        self._base_url = base_url.rstrip("/")
        self._timeout_s = timeout_s
        self._transport = transport

    @classmethod
    def from_settings(
        cls,
        config: Settings,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> "GeminiAnalysisClient":
        return cls(
            config.gemini_api_key,
            model=config.gemini_model,
            base_url=config.gemini_base_url,
            timeout_s=config.analysis_timeout_s,
            transport=transport,
        )

    @property
    def configured(self) -> bool:
        return bool(self._api_key)

    @property
    def endpoint(self) -> str:
        return f"{self._base_url}/models/{self._model}:generateContent"

    def _client_kwargs(self) -> dict[str, Any]:
        kwargs: dict[str, Any] = {}
        if self._timeout_s is not None:
            kwargs["timeout"] = self._timeout_s
        if self._transport is not None:
            kwargs["transport"] = self._transport
        return kwargs

    async def analyze(self, resume_text: str, job_description: str) -> AnalysisResult:
        if not (resume_text or "").strip() or not (job_description or "").strip():
            raise InputValidationError(MISSING_INPUT_MESSAGE)
        if not self.configured:
            raise ConfigurationError(MISSING_API_KEY_MESSAGE)

        started = time.perf_counter()
        body = build_request_body(resume_text, job_description)
        try:
            async with httpx.AsyncClient(**self._client_kwargs()) as client:
                response = await client.post(
                    self.endpoint,
                    params={"key": self._api_key},
                    json=body,
                    headers={"Content-Type": "application/json"},
                )
        except httpx.HTTPError as exc:
            logger.warning("analysis_request_failed model=%s: %s", self._model, exc)
            raise TransportError(ANALYSIS_FAILED_MESSAGE) from exc

        latency_ms = int((time.perf_counter() - started) * 1000)
        if not response.is_success:
            logger.warning(
                "analysis_request_rejected model=%s status=%s latency_ms=%s",
                self._model,
                response.status_code,
                latency_ms,
            )
            raise TransportError(ANALYSIS_FAILED_MESSAGE)

        try:
            envelope = response.json()
        except ValueError as exc:
            raise ResponseParseError(ANALYSIS_FAILED_MESSAGE) from exc

        try:
            result = parse_analysis_result(extract_candidate_text(envelope))
        except ResponseParseError:
            logger.warning("analysis_response_invalid model=%s latency_ms=%s", self._model, latency_ms)
            raise
        logger.info(
            "analysis_ok model=%s resume_len=%s jd_len=%s score=%s latency_ms=%s",
            self._model,
            len(resume_text),
            len(job_description),
            result.match_score,
            latency_ms,
        )
        return result
