import asyncio
import json
import unittest

import httpx

from atspro.core.errors import (
    ANALYSIS_FAILED_MESSAGE,
    MISSING_API_KEY_MESSAGE,
    MISSING_INPUT_MESSAGE,
    PDF_READ_MESSAGE,
    UNSUPPORTED_FILE_MESSAGE,
)
from atspro.identity.gate import IdentityGate
from atspro.ingestion.documents import DocumentIngestor, FileUpload
from atspro.schemas.analysis import AnalysisResult
from atspro.services.workspace_service import SAMPLE_FILE_NAME, WorkspaceService

from fakes import (
    GO_RESULT,
    FakeIdentityProvider,
    FakeLoader,
    FakePdfLibrary,
    RecordingTransport,
    analysis_client,
    gemini_envelope,
    text_transport,
)


class ExplodingClient:
    async def analyze(self, resume_text, job_description):
        raise KeyError("unexpected")


class WorkspaceServiceTests(unittest.IsolatedAsyncioTestCase):
    async def asyncSetUp(self):
        self.gate = IdentityGate(FakeIdentityProvider())
        await self.gate.sign_in("token")

    def _service(self, transport=None, *, api_key="test-key", library=None, client=None):
        transport = transport or text_transport(json.dumps(GO_RESULT))
        self.transport = transport
        ingestor = DocumentIngestor(loader=FakeLoader(library or FakePdfLibrary([["PDF", "resume"]])))
        return WorkspaceService(self.gate, client or analysis_client(transport, api_key=api_key), ingestor)

    async def test_session_is_mirrored_into_state(self):
        service = self._service()
        self.assertEqual(service.state.session.uid, "uid-token")

    async def test_direct_edit_replaces_text_and_clears_file_name(self):
        service = self._service()
        await service.ingest_file(FileUpload("cv.txt", "text/plain", b"uploaded"))

        service.set_resume_text("  pasted verbatim  ")

        self.assertEqual(service.state.resume_text, "  pasted verbatim  ")
        self.assertEqual(service.state.resume_file_name, "")

    async def test_text_upload_sets_text_and_file_name(self):
        service = self._service()
        await service.ingest_file(FileUpload("cv.txt", "text/plain", b"Go engineer"))

        self.assertEqual(service.state.resume_text, "Go engineer")
        self.assertEqual(service.state.resume_file_name, "cv.txt")
        self.assertIsNone(service.state.error)

    async def test_unsupported_upload_keeps_text_and_records_name(self):
        service = self._service()
        service.set_resume_text("previous")

        await service.ingest_file(FileUpload("cv.docx", "application/msword", b"..."))

        self.assertEqual(service.state.resume_text, "previous")
        self.assertEqual(service.state.resume_file_name, "cv.docx")
        self.assertEqual(service.state.error.message, UNSUPPORTED_FILE_MESSAGE)
        self.assertEqual(service.state.error.kind, "ingestion")

    async def test_pdf_failure_keeps_text_and_clears_loading(self):
        service = self._service(library=FakePdfLibrary(fail_open=True))
        service.set_resume_text("previous")

        await service.ingest_file(FileUpload("scan.pdf", "application/pdf", b"%PDF"))

        self.assertEqual(service.state.resume_text, "previous")
        self.assertEqual(service.state.error.message, PDF_READ_MESSAGE)
        self.assertFalse(service.state.loading)

    async def test_pdf_upload_replaces_text(self):
        service = self._service()
        await service.ingest_file(FileUpload("cv.pdf", "application/pdf", b"%PDF"))

        self.assertEqual(service.state.resume_text, "PDF resume")
        self.assertFalse(service.state.extracting)

    async def test_new_ingest_clears_previous_error(self):
        service = self._service()
        await service.ingest_file(FileUpload("cv.png", "image/png", b""))
        await service.ingest_file(FileUpload("cv.txt", "text/plain", b"ok"))

        self.assertIsNone(service.state.error)

    async def test_analyze_success(self):
        service = self._service()
        service.set_resume_text("Senior engineer with 5 years Go experience")
        service.set_job_description("Looking for a Go backend engineer")

        await service.analyze()

        self.assertEqual(service.state.result.as_payload(), GO_RESULT)
        self.assertIsNone(service.state.error)
        self.assertFalse(service.state.loading)

    async def test_analyze_validation_error_makes_no_call(self):
        service = self._service()
        service.set_job_description("Go job")

        await service.analyze()

        self.assertEqual(self.transport.requests, [])
        self.assertEqual(service.state.error.kind, "validation")
        self.assertEqual(service.state.error.message, MISSING_INPUT_MESSAGE)
        self.assertIsNone(service.state.result)

    async def test_analyze_configuration_error_makes_no_call(self):
        service = self._service(api_key=None)
        service.load_sample()

        await service.analyze()

        self.assertEqual(self.transport.requests, [])
        self.assertEqual(service.state.error.kind, "configuration")
        self.assertEqual(service.state.error.message, MISSING_API_KEY_MESSAGE)

    async def test_analyze_non_success_leaves_result_unset(self):
        service = self._service(RecordingTransport(lambda request: httpx.Response(500, text="boom")))
        service.load_sample()

        await service.analyze()

        self.assertIsNone(service.state.result)
        self.assertEqual(service.state.error.message, ANALYSIS_FAILED_MESSAGE)
        self.assertFalse(service.state.loading)

    async def test_analyze_malformed_json_leaves_result_unset(self):
        service = self._service(text_transport("{not json"))
        service.load_sample()

        await service.analyze()

        self.assertIsNone(service.state.result)
        self.assertEqual(service.state.error.kind, "parse")
        self.assertEqual(service.state.error.message, ANALYSIS_FAILED_MESSAGE)

    async def test_failed_analysis_replaces_previous_result(self):
        responses = [
            httpx.Response(200, json=gemini_envelope(json.dumps(GO_RESULT))),
            httpx.Response(502, text="bad gateway"),
        ]
        service = self._service(RecordingTransport(lambda request: responses.pop(0)))
        service.load_sample()

        await service.analyze()
        self.assertIsNotNone(service.state.result)
        await service.analyze()

        self.assertIsNone(service.state.result)
        self.assertIsNotNone(service.state.error)

    async def test_unexpected_exception_is_contained(self):
        service = self._service(client=ExplodingClient())
        service.load_sample()

        await service.analyze()

        self.assertEqual(service.state.error.message, ANALYSIS_FAILED_MESSAGE)
        self.assertFalse(service.state.analyzing)

    async def test_second_analyze_while_in_flight_is_ignored(self):
        release = asyncio.Event()
        calls = []

        class SlowClient:
            async def analyze(self, resume_text, job_description):
                calls.append(resume_text)
                await release.wait()
                return AnalysisResult.model_validate(GO_RESULT)

        service = self._service(client=SlowClient())
        service.load_sample()

        first = asyncio.create_task(service.analyze())
        await asyncio.sleep(0)
        self.assertTrue(service.state.loading)
        await service.analyze()
        release.set()
        await first

        self.assertEqual(len(calls), 1)
        self.assertEqual(service.state.result.match_score, 82)

    async def test_sign_out_clears_state_and_discards_late_result(self):
        release = asyncio.Event()

        class SlowClient:
            async def analyze(self, resume_text, job_description):
                await release.wait()
                return AnalysisResult.model_validate(GO_RESULT)

        service = self._service(client=SlowClient())
        service.load_sample()
        pending = asyncio.create_task(service.analyze())
        await asyncio.sleep(0)

        await self.gate.sign_out()
        release.set()
        await pending

        state = service.state
        self.assertIsNone(state.session)
        self.assertEqual(state.resume_text, "")
        self.assertEqual(state.job_description, "")
        self.assertIsNone(state.result)
        self.assertFalse(state.loading)

    async def test_analyze_is_ignored_while_pdf_is_extracting(self):
        release = asyncio.Event()

        class BlockingLoader:
            async def ensure_loaded(self):
                await release.wait()
                return FakePdfLibrary([["NEW", "PDF"]])

        service = WorkspaceService(
            self.gate,
            analysis_client(text_transport(json.dumps(GO_RESULT))),
            DocumentIngestor(loader=BlockingLoader()),
        )
        service.set_resume_text("old text")
        service.set_job_description("Go job")

        upload = asyncio.create_task(service.ingest_file(FileUpload("new.pdf", "application/pdf", b"%PDF")))
        await asyncio.sleep(0)
        self.assertTrue(service.state.loading)
        await service.analyze()
        release.set()
        await upload

        state = service.state
        self.assertEqual(state.resume_text, "NEW PDF")
        self.assertEqual(state.resume_file_name, "new.pdf")
        self.assertIsNone(state.result)
        self.assertIsNone(state.error)
        self.assertFalse(state.loading)

    async def test_sign_out_discards_pending_ingestion_error(self):
        release = asyncio.Event()

        class FailingLoader:
            async def ensure_loaded(self):
                await release.wait()
                return FakePdfLibrary(fail_open=True)

        service = WorkspaceService(
            self.gate,
            analysis_client(text_transport(json.dumps(GO_RESULT))),
            DocumentIngestor(loader=FailingLoader()),
        )

        upload = asyncio.create_task(service.ingest_file(FileUpload("scan.pdf", "application/pdf", b"%PDF")))
        await asyncio.sleep(0)
        await self.gate.sign_out()
        release.set()
        await upload

        self.assertIsNone(service.state.error)
        self.assertEqual(service.state.resume_text, "")

    async def test_switching_user_discards_previous_documents(self):
        service = self._service()
        service.load_sample()
        await service.analyze()
        self.assertIsNotNone(service.state.result)

        await self.gate.sign_in("other")

        state = service.state
        self.assertEqual(state.session.uid, "uid-other")
        self.assertEqual(state.resume_text, "")
        self.assertEqual(state.resume_file_name, "")
        self.assertEqual(state.job_description, "")
        self.assertIsNone(state.result)

    async def test_same_user_signing_in_again_keeps_documents(self):
        service = self._service()
        service.load_sample()

        await self.gate.sign_in("token")

        self.assertEqual(service.state.resume_file_name, SAMPLE_FILE_NAME)

    async def test_dismiss_error(self):
        service = self._service()
        await service.analyze()
        self.assertIsNotNone(service.state.error)

        service.dismiss_error()

        self.assertIsNone(service.state.error)

    async def test_load_sample(self):
        service = self._service()
        service.load_sample()

        self.assertTrue(service.state.resume_text)
        self.assertTrue(service.state.job_description)
        self.assertEqual(service.state.resume_file_name, SAMPLE_FILE_NAME)

    async def test_close_unsubscribes_from_gate(self):
        service = self._service()
        service.load_sample()
        service.close()

        await self.gate.sign_out()

        self.assertTrue(service.state.resume_text)


if __name__ == "__main__":
    unittest.main()
