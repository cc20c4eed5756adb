import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from loguru import logger

from .constants import CORS_ORIGINS, DATABASE_URL, DEBUG, ROOT_PATH
from .routers import articles, statistics
from .routers.common import error_response
from .store import ArticleStore


def create_app(store: ArticleStore | None = None) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        owned = app.state.store is None
        if owned:
            app.state.store = ArticleStore.from_url(DATABASE_URL, echo=DEBUG)
        app.state.store.create_tables()
        logger.info("Reading list API started")
        yield
        if owned:
            app.state.store.engine.dispose()
            app.state.store = None

    app = FastAPI(title="Reading List", root_path=ROOT_PATH, lifespan=lifespan)
    app.state.store = store

    for router in (articles.router, statistics.router):
        app.include_router(router)
        app.include_router(router, prefix="/api")

    @app.get("/health")
    def health() -> dict[str, str]:
        return {"status": "healthy"}

    @app.exception_handler(RequestValidationError)
    async def validation_error(request: Request, exc: RequestValidationError):
        logger.debug(f"Invalid request to {request.url.path}: {exc.errors()}")
        return error_response("Invalid request body", 400)

    @app.exception_handler(Exception)
    async def unexpected_error(request: Request, exc: Exception):
        logger.exception(f"Error handling {request.method} {request.url.path}: {exc}")
        return error_response("Internal server error", 500)

    @app.middleware("http")
    async def add_process_time_header(request: Request, call_next):
        start_time = time.time()
        response = await call_next(request)
        process_time = time.time() - start_time
        response.headers["X-Process-Time"] = str(process_time)
        logger.debug(f"Processed request in {process_time:.3f} seconds")
        return response

    app.add_middleware(GZipMiddleware, minimum_size=1000)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ORIGINS,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    return app


app = create_app()
