"""FastAPI application entrypoint. No business logic; only wiring and middleware."""

from collections.abc import Callable

from dotenv import load_dotenv

load_dotenv()

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.orm import Session

from app.api.routes import router as api_router
from app.core.config import Settings, get_settings
from app.core.database import SessionLocal
from app.core.errors import register_exception_handlers
from app.core.gate import AuthenticationGate, AuthenticationMiddleware
from app.core.logging_config import configure_logging
from app.core.tokens import TokenService, TokenSettings


def create_app(
    settings: Settings | None = None,
    session_factory: Callable[[], Session] | None = None,
) -> FastAPI:
    """Build the API. Tests pass their own settings and session factory."""
    settings = settings or get_settings()
    configure_logging(settings.LOG_LEVEL)

    app = FastAPI(
        title="Wardrobe API",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )
    token_service = TokenService(TokenSettings.from_settings(settings))
    app.state.settings = settings
    app.state.token_service = token_service

    # Added first so CORS stays outermost and preflight requests skip authentication.
    app.add_middleware(
        AuthenticationMiddleware,
        gate=AuthenticationGate(token_service),
        session_factory=session_factory or SessionLocal,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["*"],
        expose_headers=["Authorization", "Content-Type"],
    )

    register_exception_handlers(app)
    app.include_router(api_router, prefix=settings.API_PREFIX)

    @app.get("/")
    def root() -> dict[str, str]:
        """Root route; minimal payload for discovery."""
        return {"message": "Wardrobe API"}

    return app


app = create_app()
