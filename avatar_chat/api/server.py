"""
Chat API - FastAPI application exposing the response orchestrator.
"""

from typing import Optional

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from ..ai.conversation import ResponseOrchestrator
from ..ai.providers import build_providers
from ..core.config import Config
from ..core.errors import InternalFault, MessageValidationError
from ..models.chat import ChatRequest
from ..voice.synthesis import create_synthesizer
from ..utils.logger import get_logger

logger = get_logger(__name__)

CHAT_PATH = "/api/chat"
HEALTH_PATH = "/api/health"

def create_orchestrator(config: Config) -> ResponseOrchestrator:
    """Build providers and synthesizer once from the start-up configuration."""
    return ResponseOrchestrator(
        providers=build_providers(config.ai),
        synthesizer=create_synthesizer(config.voice, config.ai),
        persona=config.persona
    )

def _error(status_code: int, message: str, headers: Optional[dict] = None) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message}, headers=headers)

def create_app(config: Config, orchestrator: Optional[ResponseOrchestrator] = None) -> FastAPI:
    """Create the FastAPI application."""
    orchestrator = orchestrator or create_orchestrator(config)

    app = FastAPI(title=config.app_name, version=config.version, debug=config.debug)
    app.state.orchestrator = orchestrator

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.server.allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request, exc: StarletteHTTPException):
        if exc.status_code == 405:
            return _error(405, "Method not allowed", headers=exc.headers)
        return _error(exc.status_code, str(exc.detail), headers=exc.headers)

    @app.exception_handler(RequestValidationError)
    async def malformed_body_handler(request, exc: RequestValidationError):
        logger.info(f"Rejected malformed chat request: {exc.errors()}")
        return _error(400, "Message is required")

    @app.exception_handler(MessageValidationError)
    async def validation_error_handler(request, exc: MessageValidationError):
        return _error(400, str(exc))

    @app.exception_handler(InternalFault)
    async def internal_fault_handler(request, exc: InternalFault):
        return _error(500, "Internal server error")

    @app.post(CHAT_PATH)
    async def chat(payload: ChatRequest):
        """Answer one chat message."""
        message = payload.message
        if not message:
            raise MessageValidationError("Message is required")

        try:
            reply = await app.state.orchestrator.respond(message)
        except Exception as e:
            logger.error(f"API error: {e}", exc_info=True)
            raise InternalFault() from e

        return reply.to_response()

    @app.get(HEALTH_PATH)
    async def health():
        """Report which provider variants and TTS engine are enabled."""
        providers = app.state.orchestrator.providers
        return {
            "status": "ok",
            "providers": {
                "primary": providers.primary.name if providers.primary else None,
                "secondary": providers.secondary.name if providers.secondary else None,
            },
            "synthesis": app.state.orchestrator.synthesizer is not None,
        }

    logger.info(f"Chat API ready at {CHAT_PATH}")
    return app
