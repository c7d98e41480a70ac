"""Locations catalog admin: FastAPI backend."""
import logging
import os
import subprocess
import sys
from contextlib import asynccontextmanager

from fastapi import FastAPI

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logging.getLogger("catalog_core").setLevel(logging.INFO)
from fastapi.middleware.cors import CORSMiddleware

from api.locations import router as locations_router
from api.routes import router
from schemas.health import HealthResponse
from utils.config import CORS_ORIGINS, PORT


def run_migrations() -> None:
    """Upgrade the document store schema to the latest Alembic revision."""
    backend_dir = os.path.dirname(os.path.abspath(__file__))
    result = subprocess.run(
        [sys.executable, "-m", "alembic", "upgrade", "head"],
        cwd=backend_dir,
        capture_output=True,
        text=True,
    )
    if result.returncode != 0:
        raise RuntimeError(f"Alembic upgrade failed: {result.stderr or result.stdout}")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Run document store migrations before serving requests."""
    run_migrations()
    yield


app = FastAPI(
    title="Locations Catalog Admin",
    description="Admin backend for the locations catalog",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(router, prefix="/api")
app.include_router(locations_router, prefix="/api")


@app.get("/api/health", response_model=HealthResponse)
def api_health() -> HealthResponse:
    """Explicit health route so /api/health is always available."""
    return HealthResponse()


@app.get("/")
def root() -> dict:
    """Root redirect/info."""
    return {"service": "locations-catalog", "docs": "/docs", "health": "/api/health"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:app", host="0.0.0.0", port=PORT)
