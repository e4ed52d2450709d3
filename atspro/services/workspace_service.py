from __future__ import annotations

import logging
from dataclasses import dataclass

from atspro.analysis.client import GeminiAnalysisClient
from atspro.core.errors import ANALYSIS_FAILED_MESSAGE, OperationError, TransportError
from atspro.identity.gate import IdentityGate, Session
from atspro.ingestion.documents import DocumentIngestor, FileUpload
from atspro.schemas.analysis import AnalysisResult

logger = logging.getLogger(__name__)

SAMPLE_FILE_NAME = "Sample.txt"
SAMPLE_RESUME = (
    "Jane Doe\n"
    "Senior Backend Engineer\n"
    "- 6 years building Python and Go services on AWS.\n"
    "- Led migration of a payments monolith to event-driven microservices.\n"
    "- Reduced API latency by 38% through caching and query tuning.\n"
    "Skills: Python, Go, PostgreSQL, Docker, Terraform, CI/CD"
)
SAMPLE_JOB_DESCRIPTION = (
    "We are hiring a Senior Backend Engineer to design and operate APIs at scale. "
    "Requirements: 5+ years with Python or Go, PostgreSQL, Kubernetes, and cloud infrastructure. "
    "Experience with observability tooling and mentoring engineers is a plus."
)


@dataclass
class AppState:
    session: Session | None = None
    resume_text: str = ""
    resume_file_name: str = ""
    job_description: str = ""
    result: AnalysisResult | None = None
    error: OperationError | None = None
    analyzing: bool = False
    extracting: bool = False
    reset_generation: int = 0

    @property
    def loading(self) -> bool:
        return self.analyzing or self.extracting


class WorkspaceService:
    """Owns the single application state and every operation that mutates it.

    Operations never raise domain errors: failures land in ``state.error``.
    """

    def __init__(
        self,
        gate: IdentityGate,
        analysis_client: GeminiAnalysisClient,
        ingestor: DocumentIngestor | None = None,
    ):
        self.state = AppState()
        self._gate = gate
        self._analysis_client = analysis_client
        self._ingestor = ingestor or DocumentIngestor()
        self._unsubscribe = gate.subscribe(self._on_identity_change)

    def close(self) -> None:
        self._unsubscribe()

    def _on_identity_change(self, session: Session | None) -> None:
        previous = self.state.session
        if previous is not None and (session is None or session.uid != previous.uid):
            self.reset()
        self.state.session = session

    def record_error(self, exc: OperationError) -> None:
        self.state.error = exc

    def dismiss_error(self) -> None:
        self.state.error = None

    def reset(self) -> None:
        state = self.state
        state.resume_text = ""
        state.resume_file_name = ""
        state.job_description = ""
        state.result = None
        state.error = None
        state.reset_generation += 1

    def set_resume_text(self, text: str) -> None:
        self.state.resume_text = text
        self.state.resume_file_name = ""

    def set_job_description(self, text: str) -> None:
        self.state.job_description = text

    def load_sample(self) -> None:
        self.state.resume_text = SAMPLE_RESUME
        self.state.job_description = SAMPLE_JOB_DESCRIPTION
        self.state.resume_file_name = SAMPLE_FILE_NAME

    async def ingest_file(self, upload: FileUpload) -> None:
        state = self.state
        state.resume_file_name = upload.filename
        state.error = None
        generation = state.reset_generation
        if self._ingestor.is_pdf(upload):
            state.extracting = True
        try:
            text = await self._ingestor.read(upload)
        except OperationError as exc:
            if generation == state.reset_generation:
                self.record_error(exc)
            return
        finally:
            state.extracting = False
        if generation == state.reset_generation:
            state.resume_text = text

    async def analyze(self) -> None:
        state = self.state
        if state.loading:
            reason = "in_flight" if state.analyzing else "extracting"
            logger.info("analysis_ignored reason=%s", reason)
            return

        state.result = None
        state.error = None
        generation = state.reset_generation
        state.analyzing = True
        try:
            result = await self._analysis_client.analyze(state.resume_text, state.job_description)
        except OperationError as exc:
            if generation == state.reset_generation:
                self.record_error(exc)
            return
        except Exception as exc:  # noqa: BLE001 - unexpected failures become the generic message
            logger.exception("analysis_unexpected_failure: %s", exc)
            if generation == state.reset_generation:
                self.record_error(TransportError(ANALYSIS_FAILED_MESSAGE))
            return
        finally:
            state.analyzing = False

        if generation != state.reset_generation:
            logger.info("analysis_discarded generation=%s current=%s", generation, state.reset_generation)
            return
        state.result = result
