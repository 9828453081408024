# src/listings/api/app.py
"""
HTTP API.

Two groups of endpoints:
- /api/marketplace/...: thin proxy that passes the marketplace payload through
  untouched, or a JSON error with `fallback: true` telling the caller to use
  local data.
- /api/properties...: the service layer, always normalized, with sample-data
  fallback already applied.
"""
from __future__ import annotations

import logging
import time
from typing import Optional

import httpx
from fastapi import FastAPI, Request, Response
from fastapi.responses import JSONResponse

from listings.clients.marketplace import UpstreamResult, get_listing, search_listings
from listings.config import ApiConfig
from listings.models import from_wire_params
from listings.service import (
    PropertyNotFoundError,
    check_api_status,
    get_property_details,
    is_api_configured,
    is_guest_mode,
    search_properties,
)

logger = logging.getLogger(__name__)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}


def _proxy_response(result: UpstreamResult, not_found_message: str) -> JSONResponse:
    if result.ok:
        return JSONResponse(result.data, headers=CORS_HEADERS)

    if result.outcome == "auth_required":
        return JSONResponse(
            {"error": "Authentication required", "status": result.status_code},
            status_code=result.status_code,
        )

    return JSONResponse(
        {
            "error": not_found_message,
            "details": result.error or "All endpoints failed",
            "fallback": True,
        },
        status_code=404,
    )


def _internal_error(exc: Exception) -> JSONResponse:
    logger.exception("Proxy error")
    return JSONResponse(
        {"error": "Internal server error", "message": str(exc), "fallback": True},
        status_code=500,
    )


def _preflight() -> Response:
    return Response(status_code=200, headers=CORS_HEADERS)


def create_app(
    config: Optional[ApiConfig] = None,
    *,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> FastAPI:
    """
    Build the app around one ApiConfig (read from the environment if not given).
    `transport` is handed to every outbound httpx client; tests use it to fake the upstream.
    """
    config = config or ApiConfig.from_env()

    app = FastAPI(
        title="Listings Search",
        version="0.1.0",
        description="Property search with a best-effort marketplace proxy and sample-data fallback",
    )

    @app.middleware("http")
    async def request_logging_middleware(request: Request, call_next):
        start_time = time.time()
        response = await call_next(request)
        process_time = time.time() - start_time
        logger.info(
            "%s %s - Status: %s - Time: %.3fs",
            request.method,
            request.url.path,
            response.status_code,
            process_time,
        )
        response.headers["X-Process-Time"] = f"{process_time:.3f}"
        return response

    @app.get("/health")
    async def health():
        return {"status": "ok"}

    # ---- proxy -------------------------------------------------------------

    @app.get("/api/marketplace/search")
    async def proxy_search(request: Request):
        try:
            params = from_wire_params(dict(request.query_params))
            result = await search_listings(config, params, transport=transport)
            return _proxy_response(result, "No valid API endpoint found")
        except Exception as exc:
            return _internal_error(exc)

    @app.options("/api/marketplace/search")
    async def proxy_search_preflight():
        return _preflight()

    @app.get("/api/marketplace/property/{property_id}")
    async def proxy_property(property_id: str):
        try:
            result = await get_listing(config, property_id, transport=transport)
            return _proxy_response(result, "Property not found")
        except Exception as exc:
            return _internal_error(exc)

    @app.options("/api/marketplace/property/{property_id}")
    async def proxy_property_preflight(property_id: str):
        return _preflight()

    # ---- service -----------------------------------------------------------

    @app.get("/api/properties")
    async def list_properties(request: Request):
        params = from_wire_params(dict(request.query_params))
        properties = await search_properties(config, params, transport=transport)
        return {"data": properties, "count": len(properties)}

    @app.get("/api/properties/{property_id}")
    async def property_details(property_id: str):
        try:
            prop = await get_property_details(config, property_id, transport=transport)
        except PropertyNotFoundError:
            return JSONResponse({"error": "Property not found"}, status_code=404)
        return {"data": prop}

    @app.get("/api/status")
    async def status():
        report = await check_api_status(config, transport=transport)
        return {
            "configured": is_api_configured(config),
            "guest_mode": is_guest_mode(config),
            **report,
        }

    return app
