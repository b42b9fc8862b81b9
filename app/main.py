"""FastAPI application factory and lifespan."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.api.v1 import api_router
from app.core.config import get_settings
from app.core.exceptions import BMIServiceError
from app.core.middleware import RequestTimeoutMiddleware
from app.db.session import engine
from app.db.vector_store import QdrantBMIStore, create_qdrant_client

settings = get_settings()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup: build the vector store client once; shutdown: cleanup."""
    # Tables are managed by Alembic (alembic upgrade head)
    client = None
    app.state.vector_store = None
    if settings.vector_store_enabled:
        client = create_qdrant_client(settings.qdrant_url, settings.qdrant_api_key)
        vector_store = QdrantBMIStore(client, settings.qdrant_collection)
        await vector_store.create_collection()
        app.state.vector_store = vector_store
        logger.info("Vector store enabled (collection=%s)", settings.qdrant_collection)
    yield
    if client is not None:
        await client.close()
    await engine.dispose()


async def service_error_handler(request: Request, exc: BMIServiceError) -> JSONResponse:
    """Client gets ``exc.message`` only; driver detail and traceback go to the log."""
    if exc.status_code >= 500:
        logger.error(
            "%s %s failed: %s (%s)",
            request.method,
            request.url.path,
            exc.message,
            exc.detail,
            exc_info=exc,
        )
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed ids and bodies are client errors (400), not 422."""
    details = "; ".join(
        f"{'.'.join(str(p) for p in err.get('loc', ()))}: {err.get('msg', '')}" for err in exc.errors()
    )
    return JSONResponse(status_code=400, content={"error": f"Invalid input. {details}".strip()})


def create_application() -> FastAPI:
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    app = FastAPI(
        title=settings.app_name,
        version="0.1.0",
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )
    # CORS: allow everything in debug, localhost in development, CORS_ORIGINS otherwise
    if settings.debug:
        cors_origins = ["*"]
    elif settings.environment == "development":
        cors_origins = ["http://localhost:3000", "http://127.0.0.1:3000", *settings.allowed_origins]
    else:
        cors_origins = settings.allowed_origins
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestTimeoutMiddleware, timeout_seconds=settings.request_timeout_seconds)

    app.add_exception_handler(BMIServiceError, service_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)

    @app.get("/")
    def root():
        return {"status": "ok", "message": settings.app_name}

    app.include_router(api_router, prefix=settings.api_prefix)
    return app


app = create_application()
