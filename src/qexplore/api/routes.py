"""
API routes.

Endpoints:
- POST `/api/generate`: main generation entrypoint.
- GET  `/api/backends`: list random sources.
- GET  `/api/types`: list anomaly types.
- GET  `/api/status`: version + configured defaults.
"""

from __future__ import annotations

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from qexplore import __version__
from qexplore.config.settings import get_settings
from qexplore.coord.flower import FLOWER_POWER_MIN_RADIUS, generate, geo_from_settings
from qexplore.core.errors import GenerationError, RandomSourceError
from qexplore.domain.models import ANOMALY_ORDER, Coordinates, GenerationMode, GenerationResponse
from qexplore.rng import available_sources, get_source

router = APIRouter()


class GenerateBody(BaseModel):
    """POST /api/generate payload; omitted knobs fall back to configured defaults."""

    lat: float
    lng: float
    radius: float | None = None
    points: int | None = Field(default=None, ge=0, le=1_000_000)
    grid_resolution: int | None = Field(default=None, ge=1, le=1000)
    mode: str | None = None
    backend: str | None = None
    seed: int | None = None
    include_points: bool = False


@router.post("/api/generate", response_model=GenerationResponse)
def post_generate(body: GenerateBody) -> GenerationResponse:
    """Run one generation with validated parameters."""
    settings = get_settings()
    defaults = settings.generation
    try:
        source = get_source(body.backend or defaults.backend, settings=settings, seed=body.seed)
        return generate(
            Coordinates(lat=body.lat, lng=body.lng),
            body.radius if body.radius is not None else defaults.radius,
            body.points if body.points is not None else defaults.points,
            body.grid_resolution if body.grid_resolution is not None else defaults.grid_resolution,
            body.include_points,
            body.mode or defaults.mode,
            source,
            geo=geo_from_settings(settings),
        )
    except GenerationError as e:
        raise HTTPException(status_code=400, detail={"code": e.code, "message": str(e)}) from e
    except RandomSourceError as e:
        raise HTTPException(status_code=503, detail={"code": e.code, "message": str(e)}) from e


@router.get("/api/backends")
def get_backends() -> dict:
    settings = get_settings()
    return {
        "default": settings.generation.backend,
        "backends": [{"name": s.name, "description": s.description} for s in available_sources()],
    }


@router.get("/api/types")
def get_types() -> dict:
    return {"types": [{"name": t.value, "description": t.description} for t in ANOMALY_ORDER]}


@router.get("/api/status")
def get_status() -> dict:
    settings = get_settings()
    return {
        "status": "ok",
        "version": __version__,
        "defaults": settings.generation.model_dump(mode="json"),
        "modes": [m.value for m in GenerationMode],
        "flower_power_min_radius": FLOWER_POWER_MIN_RADIUS,
    }
