"""
API route definitions.

Endpoints:
    GET  /               Landing page (HTML)
    GET  /api/landing    Landing page view-model (JSON)
    GET  /health         Liveness check
    GET  /metrics        Prometheus metrics
"""

from __future__ import annotations

from pathlib import Path

from fastapi import APIRouter, Request, Response
from fastapi.responses import HTMLResponse, JSONResponse
from fastapi.templating import Jinja2Templates

from recoflag.api.metrics import (
    metrics_response,
    record_degradation,
    record_recommendation_fetch,
)
from recoflag.config import (
    CACHE_CONTROL,
    CUSTOM_RECO_PLACEHOLDER,
    RECO_PRESETS,
)
from recoflag.core.display import clean_price, format_log_timestamp
from recoflag.services.landing import LandingResult

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))
templates.env.filters["clean_price"] = clean_price
templates.env.filters["log_time"] = format_log_timestamp

router = APIRouter()


# ---------------------------------------------------------------------------
# Shared helpers
# ---------------------------------------------------------------------------


async def _build_landing(request: Request) -> LandingResult:
    """Run the landing pipeline for this request and record its outcome."""
    landing = request.app.state.landing
    result = await landing.service.build_page(request.query_params.multi_items())

    if result.degraded:
        record_degradation(result.reason)
    elif result.fetched_recommendations:
        record_recommendation_fetch(
            "fallback" if result.recommendation_error else "ok"
        )
    return result


def _cache_headers(result: LandingResult) -> dict[str, str]:
    """Only successful pages are cacheable."""
    if result.degraded:
        return {}
    return {"Cache-Control": CACHE_CONTROL}


# ---------------------------------------------------------------------------
# Landing page
# ---------------------------------------------------------------------------


@router.get("/", response_class=HTMLResponse)
async def landing_page(request: Request):
    """Server-rendered landing page with recommendations, logs and overrides."""
    result = await _build_landing(request)
    page = result.page
    return templates.TemplateResponse(
        request,
        "index.html",
        {
            "page": page,
            "view": page.to_json(),
            "presets": RECO_PRESETS,
            "custom_placeholder": CUSTOM_RECO_PLACEHOLDER,
            "ga_measurement_id": request.app.state.landing.settings.ga_measurement_id,
        },
        headers=_cache_headers(result),
    )


@router.get("/api/landing")
async def landing_data(request: Request):
    """The landing page view-model as JSON."""
    result = await _build_landing(request)
    return JSONResponse(result.page.to_json(), headers=_cache_headers(result))


# ---------------------------------------------------------------------------
# Health
# ---------------------------------------------------------------------------


@router.get("/health")
async def health(request: Request):
    return {"status": "ok", "log_entries": len(request.app.state.landing.log_sink)}


# ---------------------------------------------------------------------------
# Prometheus metrics
# ---------------------------------------------------------------------------


@router.get("/metrics")
async def metrics():
    """Prometheus metrics endpoint."""
    body, content_type = metrics_response()
    return Response(content=body, media_type=content_type)
