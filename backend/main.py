from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api import scenario
from core.config import settings
from core.database import engine, init_db
from core.logging import configure_logging, get_logger
from core.middleware import RequestLoggingMiddleware
from core.errors import register_error_handlers
from core.validation import (
    DEFAULT_MESSAGES_DIR,
    MessageCatalog,
    MessageResolver,
    ValidationConfig,
    ValidationEngine,
    get_registry,
)
from models.scenario import SCENARIO_PAYLOADS
import custom_validators

# Initialize logging before anything else
configure_logging(
    level=settings.LOG_LEVEL,
    json_logs=settings.LOG_JSON,
    log_sql=settings.LOG_SQL,
)

log = get_logger(__name__)


def build_validation_engine() -> ValidationEngine:
    """Engine over the application registry and message catalogs.

    Raises ConfigurationError when a payload references an unknown predicate.
    """
    resolver = MessageResolver(
        MessageCatalog.from_directories(DEFAULT_MESSAGES_DIR, custom_validators.MESSAGES_DIR),
        default_locale=settings.VALIDATION_DEFAULT_LOCALE,
    )
    registry = get_registry()
    validation_engine = ValidationEngine(registry, resolver=resolver, config=ValidationConfig.from_settings(settings))
    validation_engine.prepare(*SCENARIO_PAYLOADS)
    registry.freeze()
    return validation_engine


@asynccontextmanager
async def lifespan(app: FastAPI):
    log.info("startup", message="Scenario API starting up")

    app.state.validation_engine = build_validation_engine()
    await init_db()

    yield

    log.info("shutdown", message="Scenario API shutting down")
    await engine.dispose()
    log.debug("database_disposed", message="Database connections closed")


app = FastAPI(
    title="Scenario API",
    description="Declarative request validation with nested structures, collections and async custom predicates",
    version="0.1.0",
    lifespan=lifespan,
)

# Register structured error handlers
register_error_handlers(app)

# Middleware (order matters: last added = first executed)
app.add_middleware(RequestLoggingMiddleware, slow_threshold_ms=1000)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:3000"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(scenario.router, prefix="/api/scenario", tags=["scenario"])


@app.get("/health")
async def health_check():
    return {"status": "healthy", "version": "0.1.0"}


if __name__ == "__main__":
    import uvicorn

    log.info("server_config", host=settings.BACKEND_HOST, port=settings.BACKEND_PORT, debug=settings.APP_DEBUG)
    uvicorn.run(
        "main:app",
        host=settings.BACKEND_HOST,
        port=settings.BACKEND_PORT,
        reload=settings.APP_DEBUG,
        log_config=None,  # Disable uvicorn's default logging, we handle it
    )
