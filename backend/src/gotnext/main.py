"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from gotnext.config import get_name_store_path, settings
from gotnext.api.routes.names import router as names_router
from gotnext.api.routes.rotation import router as rotation_router
from gotnext.services.name_store import JsonFileNameStore
from gotnext.services.remote_queue_client import get_remote_queue_client
from gotnext.services.session_manager import RotationSessionManager

logging.basicConfig(
    level=logging.DEBUG if settings.debug else settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown events."""
    # Startup: Initialize session manager and collaborators
    if not hasattr(app.state, "session_manager"):
        app.state.session_manager = RotationSessionManager(settings)
    if not hasattr(app.state, "name_store"):
        app.state.name_store = JsonFileNameStore(get_name_store_path())
    if settings.enable_remote_queue and not hasattr(app.state, "remote_queue"):
        app.state.remote_queue = get_remote_queue_client(
            settings.remote_queue_url, timeout=settings.remote_queue_timeout
        )
    yield
    # Shutdown: Close the remote client if one was opened
    remote = getattr(app.state, "remote_queue", None)
    if remote is not None:
        await remote.close()


app = FastAPI(
    title="Got Next",
    description="Pickup basketball next-up rotation",
    version="0.1.0",
    lifespan=lifespan,
)

# Configure CORS for the mobile/web client
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "service": "gotnext"}


@app.get("/")
async def root():
    """Root endpoint with API info."""
    return {
        "name": "Got Next API",
        "version": "0.1.0",
        "docs": "/docs",
    }


# Register routers
app.include_router(rotation_router)
app.include_router(names_router)


def run():
    """Serve the API with uvicorn using configured host and port."""
    import uvicorn

    uvicorn.run("gotnext.main:app", host=settings.host, port=settings.port, reload=settings.debug)
