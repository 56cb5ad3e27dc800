"""
FastAPI Backend for DocCluster

Provides the document clustering REST API.
Strictly imports from docluster/ without modifications.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from backend.deps import get_pipeline, set_pipeline
from backend.models import HealthResponse
from backend.routes.clustering import router as clustering_router
from docluster import __version__
from docluster.config import get_config
from docluster.utils.logger import setup_logger

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for startup/shutdown events.

    Loads config.json (or defaults), configures logging and builds the pipeline.
    """
    try:
        config = get_config()
        setup_logger(config.logging, names=("docluster", "backend"))
        get_pipeline()
        logger.info("DocCluster backend ready")
    except Exception as e:
        logger.error(f"FATAL: Failed to initialize backend: {e}", exc_info=True)
        # Fail fast - prevent server from starting in broken state
        raise RuntimeError("Cannot start server without valid configuration") from e

    yield

    set_pipeline(None)
    logger.info("Shutdown complete")


app = FastAPI(
    title="DocCluster API",
    description="Document clustering with K-means/DBSCAN and keyword labels",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost:3000",
        "http://localhost:5173",
    ],
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type", "Accept", "Origin"],
)

# Register clustering routes (/cluster-documents)
app.include_router(clustering_router)


@app.get("/health", response_model=HealthResponse)
def health_check() -> HealthResponse:
    """Health check endpoint."""
    return HealthResponse(status="ok", version=__version__)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "backend.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        log_level="info"
    )
