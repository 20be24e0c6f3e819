"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from todo_api.api import auth, todos
from todo_api.config import get_settings
from todo_api.errors import UnhandledErrorMiddleware, register_exception_handlers

settings = get_settings()

logger = logging.getLogger(__name__)


def configure_logging() -> None:
    """Configure root logging from settings."""
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Handle application startup and shutdown events."""
    logger.info(f"Starting Todo API ({settings.environment})")
    yield
    logger.info("Shutting down Todo API")


configure_logging()

app = FastAPI(
    title="Todo API",
    description="Per-user todo items with cookie-based session authentication",
    version="0.1.0",
    lifespan=lifespan,
)

# Added first so it runs inside CORS
app.add_middleware(UnhandledErrorMiddleware)

# Credentials are required so the browser sends the session cookie
app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.frontend_url],
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE"],
    allow_headers=["Content-Type", "Authorization"],
)

register_exception_handlers(app)

# Register routers
app.include_router(auth.router)
app.include_router(todos.router)


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "ok", "environment": settings.environment}


def run() -> None:
    """Serve the application with uvicorn."""
    import uvicorn

    uvicorn.run("todo_api.main:app", host=settings.host, port=settings.port)


if __name__ == "__main__":
    run()
