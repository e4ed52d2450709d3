from contextlib import asynccontextmanager
import logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app):
    config = app.state.settings
    logger.info(
        "startup analysis_configured=%s identity_configured=%s model=%s",
        config.analysis_configured,
        config.identity_configured,
        config.gemini_model,
    )
    if not config.analysis_configured:
        logger.warning("GEMINI_API_KEY is missing; analysis requests will be refused.")
    if not config.identity_configured:
        logger.warning("Firebase credentials are missing; sign-in is disabled.")
    yield
    await app.state.identity_gate.sign_out()
    app.state.workspace.close()
