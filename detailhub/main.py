import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from . import __version__, config
from . import models  # noqa: F401 - registers tables on Base.metadata
from .database import Database
from .domain.customers import router as customers_router
from .domain.detailers import router as detailers_router
from .routes.twilio_webhooks import router as twilio_webhooks_router
from .security_headers import SecurityHeadersMiddleware

# Configure logging
logging.basicConfig(
    level=getattr(logging, config.LOG_LEVEL, logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# Reduce verbosity of third-party libraries
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("httpcore").setLevel(logging.WARNING)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Application starting up...")
    try:
        app.state.db.create_all()
        logger.info("Database tables created successfully")
    except Exception as e:
        # Ignore "already exists" errors from race conditions between workers
        error_msg = str(e)
        if "already exists" in error_msg or "duplicate key" in error_msg:
            logger.info("Database tables already exist (created by another worker)")
        else:
            logger.error(f"Failed to create database tables: {e}")
            raise

    yield
    logger.info("Application shutting down...")
    app.state.db.dispose()


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """
    Convert 422 validation errors on the Authorization header to 401 so clients
    see an authentication failure rather than a schema error
    """
    for error in exc.errors():
        if error.get("loc") and "authorization" in str(error.get("loc")).lower():
            logger.warning(
                f"Authentication failed for {request.url.path}: Missing or invalid Authorization header"
            )
            return JSONResponse(
                status_code=401,
                content={
                    "detail": "Not authenticated. Please provide a valid Bearer token in the Authorization header."
                },
            )

    logger.warning(f"Validation error for {request.url.path}: {exc.errors()}")
    return JSONResponse(
        status_code=422, content={"detail": jsonable_errors(exc.errors())}
    )


def jsonable_errors(errors) -> list:
    # ValueError instances in "ctx" are not JSON serializable
    cleaned = []
    for error in errors:
        error = dict(error)
        if "ctx" in error:
            error["ctx"] = {k: str(v) for k, v in error["ctx"].items()}
        cleaned.append(error)
    return cleaned


def create_app(database: Optional[Database] = None) -> FastAPI:
    app = FastAPI(title="DetailHub API", version=__version__, lifespan=lifespan)
    app.state.db = database or Database()

    app.add_exception_handler(RequestValidationError, validation_exception_handler)

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        try:
            return await call_next(request)
        except Exception as e:
            logger.error(f"{request.method} {request.url.path} - Error: {str(e)}")
            raise

    if config.SECURITY_HEADERS_ENABLED:
        app.add_middleware(
            SecurityHeadersMiddleware, exclude_paths=["/health", "/docs", "/openapi.json"]
        )
        logger.info("Security headers enabled")
    else:
        logger.warning("Security headers DISABLED - only use in development!")

    logger.info(f"CORS allowed origins: {config.ALLOWED_ORIGINS}")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH"],
        allow_headers=["*"],
    )

    # Routes
    app.include_router(detailers_router)
    app.include_router(customers_router)
    if config.TWILIO_INBOUND_SMS_ENABLED:
        app.include_router(twilio_webhooks_router)
    else:
        logger.info("Inbound SMS webhook disabled")

    @app.get("/")
    def root():
        return {"message": "DetailHub API is running"}

    @app.get("/health")
    def health():
        return {"status": "healthy"}

    @app.get("/health/db")
    def database_health(request: Request):
        """Check database connectivity for monitoring"""
        try:
            request.app.state.db.ping()
            return {"status": "healthy", "database": {"connected": True}}
        except Exception as e:
            logger.error(f"❌ Database health check failed: {e}")
            return JSONResponse(
                status_code=503,
                content={"status": "unhealthy", "database": {"connected": False, "error": str(e)}},
            )

    return app


def run():
    import uvicorn

    uvicorn.run("detailhub.main:create_app", factory=True, host="0.0.0.0", port=8000)
