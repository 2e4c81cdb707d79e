"""FastAPI application entry point."""
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from zcash_viewer.config import settings
from zcash_viewer.api.routes import history, session
from zcash_viewer.services.sync_backends.http import HttpSyncBackend
from zcash_viewer.services.sync_session import SyncSessionController
from zcash_viewer.utils.logging_setup import configure_logging


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging(settings)
    backend = HttpSyncBackend()
    app.state.session = SyncSessionController(backend)
    yield
    await backend.aclose()


app = FastAPI(
    title=settings.api_title,
    version=settings.api_version,
    description="Shielded wallet balance and history viewer API",
    lifespan=lifespan
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(session.router, prefix=f"{settings.api_prefix}/session", tags=["session"])
app.include_router(history.router, prefix=f"{settings.api_prefix}/history", tags=["history"])


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "Zcash Viewer API",
        "version": settings.api_version,
        "docs": "/docs"
    }


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy"}
