from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any, Dict, Optional

from fastapi import Depends, FastAPI, Form, Request
from fastapi.responses import HTMLResponse, JSONResponse
from limits import parse as parse_rate_limit
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

from . import views
from .config import Settings, get_settings
from .exceptions import EnergyStatsError, get_error_response
from .models import RawSearchRequest, SearchRequest
from .services.cache import ReportCache
from .services.dataset import load_data_context
from .services.http_pool import HTTPClientPool, close_http_pool, get_http_client
from .services.search import SearchService

settings: Settings = get_settings()

logger = logging.getLogger("energy_stats")
logging.basicConfig(level=settings.log_level.upper())


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Load the dataset before serving; a failed load stops startup."""
    # === STARTUP ===
    client = get_http_client()
    try:
        context = await load_data_context(settings, client)
    except EnergyStatsError as e:
        logger.error(f"Failed to load World Bank dataset, refusing to start: {e.message}")
        await close_http_pool()
        raise
    except Exception:
        logger.exception("Unexpected error while loading World Bank dataset, refusing to start")
        await close_http_pool()
        raise

    cache = ReportCache(ttl=settings.report_cache_ttl) if settings.report_cache_enabled else None
    app.state.search_service = SearchService(
        context,
        cache=cache,
        suggestion_limit=settings.suggestion_limit,
    )
    logger.info("energy-stats ready")

    yield

    # === SHUTDOWN ===
    await close_http_pool()


app = FastAPI(title="World Bank Energy Statistics", version="1.0.0", lifespan=lifespan)

limiter = Limiter(key_func=get_remote_address)
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

RATE_LIMITED_PATHS = ("/search-suggestions", "/do-search")


@app.middleware("http")
async def rate_limit_middleware(request: Request, call_next):
    """Apply the configured rate limit per client to the search endpoints."""
    path = request.url.path
    if settings.dev_mode or path not in RATE_LIMITED_PATHS:
        return await call_next(request)

    forwarded_for = request.headers.get("X-Forwarded-For")
    client_ip = forwarded_for.split(",")[0].strip() if forwarded_for else get_remote_address(request)

    rate_limit = parse_rate_limit(settings.rate_limit)
    if not limiter._limiter.hit(rate_limit, f"{client_ip}:{path}"):
        return JSONResponse(
            status_code=429,
            content={"detail": f"Rate limit exceeded. Limit: {settings.rate_limit}"},
            headers={"Retry-After": "60"},
        )
    return await call_next(request)


@app.exception_handler(EnergyStatsError)
async def energy_stats_error_handler(request: Request, exc: EnergyStatsError) -> JSONResponse:
    logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(status_code=500, content=get_error_response(exc))


def get_search_service(request: Request) -> SearchService:
    return request.app.state.search_service


def get_search_request(
    searchinput: Optional[str] = Form(default=None),
    sortColumn: Optional[str] = Form(default=None),
    sortDirection: Optional[str] = Form(default=None),
) -> SearchRequest:
    """Bind the posted form to a validated search request."""
    raw = RawSearchRequest(searchinput=searchinput, sortColumn=sortColumn, sortDirection=sortDirection)
    return SearchRequest.from_raw(raw, default_sort=settings.default_sort)


@app.get("/", response_class=HTMLResponse)
async def index() -> HTMLResponse:
    return HTMLResponse(views.render_index())


@app.post("/search-suggestions", response_class=HTMLResponse)
async def suggest_destinations(
    search: SearchRequest = Depends(get_search_request),
    service: SearchService = Depends(get_search_service),
) -> HTMLResponse:
    """Finds destinations to suggest."""
    destinations = service.find_destinations(search.search_input)
    return HTMLResponse(views.render_suggestions(destinations))


@app.post("/do-search", response_class=HTMLResponse)
async def find_energy_reports(
    search: SearchRequest = Depends(get_search_request),
    service: SearchService = Depends(get_search_service),
) -> HTMLResponse:
    """Renders the energy reports matching the posted search text."""
    reports = service.resolve_reports(search.sort, search.search_input)
    return HTMLResponse(views.render_reports_table(search.sort, reports))


@app.get("/health")
async def health(service: SearchService = Depends(get_search_service)) -> Dict[str, Any]:
    return {
        "status": "ok",
        "environment": settings.environment,
        "countries": len(service.context.countries),
        "regions": len(service.context.regions),
        "isoCodes": len(service.context.code_lookup) if service.context.code_lookup is not None else 0,
        "cache": service.cache.get_stats() if service.cache is not None else None,
        "httpPool": HTTPClientPool.get_stats(),
    }
