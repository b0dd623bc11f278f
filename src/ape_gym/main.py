"""FastAPI application for Ape Gym."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from . import __version__
from .api.deps import get_database
from .api.exception_handlers import register_exception_handlers
from .api.middleware.rate_limit import limiter
from .api.routes import admin, app as app_routes, auth
from .config import DEFAULT_JWT_SECRET, Settings, get_settings
from .db.database import GymDatabase
from .db.seed import seed_admin, seed_workout_templates
from .utils.log_sanitizer import install_log_sanitizer

# Install log sanitization filter to prevent credential/PII leakage
# This must be done before any logging occurs
install_log_sanitizer()

logger = logging.getLogger(__name__)


def validate_security_settings(settings: Settings) -> None:
    """Warn about settings that are unsafe outside development."""
    if settings.jwt_secret == DEFAULT_JWT_SECRET:
        logger.warning(
            "JWT_SECRET is the built-in default. Set JWT_SECRET before exposing the API."
        )
    else:
        logger.info("JWT_SECRET: configured")

    if settings.smtp_configured:
        logger.info(f"SMTP: configured ({settings.smtp_host}:{settings.smtp_port})")
    else:
        logger.warning("SMTP not configured. Emails will be written to the log instead.")


def run_startup_seeding(db: GymDatabase, settings: Settings) -> None:
    if settings.seed_admin:
        seed_admin(db, settings.seed_admin_email, settings.seed_admin_password)
    if settings.seed_templates:
        seed_workout_templates(db)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    settings = get_settings()
    logger.info(f"Starting Ape Gym API v{__version__}")
    validate_security_settings(settings)

    # Honour a test override of the database dependency
    db_factory = app.dependency_overrides.get(get_database, get_database)
    db = db_factory()
    logger.info(f"Database: {db.db_path}")
    run_startup_seeding(db, settings)

    yield

    logger.info("Shutting down Ape Gym API")


def create_app() -> FastAPI:
    """Build the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title="Ape Gym API",
        description="Workouts, challenges and rankings for gym students and staff",
        version=__version__,
        lifespan=lifespan,
        redirect_slashes=False,
    )

    # Rate limiting
    app.state.limiter = limiter

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    app.include_router(auth.router)
    app.include_router(app_routes.router)
    app.include_router(admin.router)

    @app.get("/health", tags=["health"])
    def health():
        return {"ok": True}

    return app


app = create_app()
