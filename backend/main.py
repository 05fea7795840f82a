from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api import user
from core.config import settings
from core.logging import configure_logging, get_logger
from core.middleware import RequestLoggingMiddleware
from core.errors import register_error_handlers

# Initialize logging before anything else
configure_logging(level=settings.LOG_LEVEL, json_logs=settings.LOG_JSON)

log = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    log.info("startup", message=f"{settings.APP_NAME} starting up")
    yield
    log.info("shutdown", message=f"{settings.APP_NAME} shutting down")


def create_app() -> FastAPI:
    app = FastAPI(
        title=settings.APP_NAME,
        description="User registration with declarative field validation and a uniform response envelope",
        version=settings.APP_VERSION,
        lifespan=lifespan,
    )

    # Register structured error handlers
    register_error_handlers(app)

    # Middleware (order matters: last added = first executed)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(user.router, prefix="/api/user", tags=["user"])

    @app.get("/health")
    async def health_check():
        return {"status": "healthy", "version": settings.APP_VERSION}

    return app


app = create_app()


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
