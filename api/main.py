import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from core import db, settings
from core.errors import register_error_handlers
from core.observability import setup_logging
from core.schemas import HealthResponse
from posts import router as posts_router

logger = logging.getLogger(__name__)

OPENAPI_TAGS = [
    {"name": "Post", "description": "Post management API"},
    {"name": "App", "description": "Application management API"},
]


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging(settings.log_level(), settings.log_format())
    # One pool per process, shared by every request through db.get_pool.
    app.state.db_pool = await db.create_pool()
    logger.info("api_started prefix=%s", settings.API_PREFIX)
    try:
        yield
    finally:
        await db.close_pool(app.state.db_pool)
        app.state.db_pool = None
        logger.info("api_stopped")


def create_app() -> FastAPI:
    app = FastAPI(
        title="Blog API definition",
        description="Simple Python API",
        version="1.0.0",
        openapi_tags=OPENAPI_TAGS,
        docs_url="/swagger-ui",
        redoc_url=None,
        openapi_url="/api-docs/openapi.json",
        lifespan=lifespan,
    )

    # Single browser origin, credentials allowed.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.cors_origin()],
        allow_credentials=True,
        allow_methods=settings.CORS_METHODS,
        allow_headers=settings.CORS_HEADERS,
    )

    register_error_handlers(app)

    app.include_router(posts_router.router, prefix=settings.API_PREFIX)

    @app.get("/health", tags=["App"], response_model=HealthResponse)
    async def health() -> HealthResponse:
        """
        Check application status. Does not touch the database.
        """
        return HealthResponse()

    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host=settings.server_host(),
        port=settings.server_port(),
        workers=settings.server_workers(),
        log_level=settings.log_level().lower(),
    )
