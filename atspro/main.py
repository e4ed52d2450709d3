import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi import _rate_limit_exceeded_handler
import sentry_sdk

from atspro.analysis.client import GeminiAnalysisClient
from atspro.api.v1.auth import router as auth_router
from atspro.api.v1.health import router as health_router
from atspro.api.v1.workspace import router as workspace_router
from atspro.core.config import Settings, settings
from atspro.core.cors import cors_allowed_origins
from atspro.core.lifespan import lifespan
from atspro.core.rate_limit import limiter
from atspro.identity.firebase import FirebaseIdentityProvider
from atspro.identity.gate import IdentityGate, IdentityProvider
from atspro.ingestion.documents import DocumentIngestor
from atspro.services.workspace_service import WorkspaceService

logging.basicConfig(level=settings.log_level, format="%(message)s")
if settings.sentry_dsn:
    sentry_sdk.init(dsn=settings.sentry_dsn)


def create_app(
    config: Settings | None = None,
    *,
    identity_provider: IdentityProvider | None = None,
    analysis_client: GeminiAnalysisClient | None = None,
    ingestor: DocumentIngestor | None = None,
) -> FastAPI:
    config = config or settings
    gate = IdentityGate(identity_provider or FirebaseIdentityProvider(config))
    workspace = WorkspaceService(
        gate,
        analysis_client or GeminiAnalysisClient.from_settings(config),
        ingestor,
    )

    application = FastAPI(title="ATSPro API", version="0.1.0", lifespan=lifespan)
    application.state.settings = config
    application.state.identity_gate = gate
    application.state.workspace = workspace

    application.add_middleware(
        CORSMiddleware,
        allow_origins=cors_allowed_origins(config),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    application.state.limiter = limiter
    application.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
    application.add_middleware(SlowAPIMiddleware)

    application.include_router(health_router, prefix="/v1", tags=["Health"])
    application.include_router(auth_router, prefix="/v1", tags=["Auth"])
    application.include_router(workspace_router, prefix="/v1", tags=["Workspace"])
    return application


app = create_app()
