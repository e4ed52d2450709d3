from fastapi import APIRouter, Depends, File, HTTPException, Request, UploadFile, status

from atspro.core.config import Settings
from atspro.core.rate_limit import rate_limit
from atspro.core.security import get_settings, get_workspace, require_session
from atspro.ingestion.documents import FileUpload
from atspro.presentation.view import present
from atspro.schemas.workspace import TextUpdateRequest, WorkspaceView
from atspro.services.workspace_service import WorkspaceService

router = APIRouter(dependencies=[Depends(require_session)])

UPLOAD_CHUNK_BYTES = 1024 * 64


async def _read_upload(file: UploadFile, max_bytes: int) -> FileUpload:
    chunks: list[bytes] = []
    total = 0
    while True:
        chunk = await file.read(UPLOAD_CHUNK_BYTES)
        if not chunk:
            break
        total += len(chunk)
        if total > max_bytes:
            raise HTTPException(
                status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
                detail=f"File too large. Maximum allowed size is {max_bytes // (1024 * 1024)} MB.",
            )
        chunks.append(chunk)
    return FileUpload(
        filename=file.filename or "uploaded-file",
        content_type=file.content_type or "",
        data=b"".join(chunks),
    )


@router.get("/workspace", response_model=WorkspaceView)
async def workspace_state(workspace: WorkspaceService = Depends(get_workspace)):
    return present(workspace.state)


@router.put("/workspace/resume", response_model=WorkspaceView)
async def workspace_set_resume(payload: TextUpdateRequest, workspace: WorkspaceService = Depends(get_workspace)):
    workspace.set_resume_text(payload.text)
    return present(workspace.state)


@router.put("/workspace/job-description", response_model=WorkspaceView)
async def workspace_set_job_description(
    payload: TextUpdateRequest,
    workspace: WorkspaceService = Depends(get_workspace),
):
    workspace.set_job_description(payload.text)
    return present(workspace.state)


@router.post("/workspace/resume/upload", response_model=WorkspaceView)
@rate_limit()
async def workspace_upload_resume(
    request: Request,
    files: list[UploadFile] = File(...),
    workspace: WorkspaceService = Depends(get_workspace),
    config: Settings = Depends(get_settings),
):
    _ = request
    # Drag-and-drop may deliver several files; only the first one counts.
    upload = await _read_upload(files[0], config.max_upload_bytes)
    await workspace.ingest_file(upload)
    return present(workspace.state)


@router.post("/workspace/sample", response_model=WorkspaceView)
async def workspace_load_sample(workspace: WorkspaceService = Depends(get_workspace)):
    workspace.load_sample()
    return present(workspace.state)


@router.post("/workspace/analyze", response_model=WorkspaceView)
@rate_limit()
async def workspace_analyze(request: Request, workspace: WorkspaceService = Depends(get_workspace)):
    _ = request
    await workspace.analyze()
    return present(workspace.state)


@router.delete("/workspace/error", response_model=WorkspaceView)
async def workspace_dismiss_error(workspace: WorkspaceService = Depends(get_workspace)):
    workspace.dismiss_error()
    return present(workspace.state)
