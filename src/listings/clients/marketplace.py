# src/listings/clients/marketplace.py

"""
Plain-function client for the marketplace (Sakani) API.

Design goals:
- Keep *all* HTTP details here so the rest of the code never deals with URLs or headers.
- We don't know the real REST shape, so every call walks an ordered list of
  candidate paths (from ApiConfig) and takes the first one that answers.
- Never raise: every call returns an UpstreamResult. Callers decide whether to
  fall back to sample data.
- Return the raw JSON; normalization happens in listings.pipeline.normalize.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Literal, Optional
from urllib.parse import quote

import httpx

from listings.config import ApiConfig
from listings.models import SearchParams, to_wire_params

logger = logging.getLogger(__name__)

Outcome = Literal["ok", "auth_required", "unavailable"]

AUTH_STATUSES = (401, 403)


@dataclass
class UpstreamResult:
    outcome: Outcome
    data: Any = None
    status_code: Optional[int] = None
    error: Optional[str] = None
    url: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.outcome == "ok"


# ---- Internal helpers ---------------------------------------------------------

def _default_headers(config: ApiConfig) -> Dict[str, str]:
    """
    Content negotiation + UA, then credentials, or browser-ish guest headers
    when there are no credentials at all.
    """
    headers = {
        "Content-Type": "application/json",
        "Accept": "application/json",
        "Accept-Language": "ar",
        "User-Agent": config.user_agent,
    }
    if config.api_key:
        headers["X-API-Key"] = config.api_key
    if config.api_token:
        headers["Authorization"] = f"Bearer {config.api_token}"
    if config.guest_mode:
        headers["X-Requested-With"] = "XMLHttpRequest"
        headers["Referer"] = config.site_url
    return headers


def _candidate_url(config: ApiConfig, path: str) -> httpx.URL:
    # Candidate paths are absolute, so they replace the base path
    # ("https://host/api/v1" + "/properties/search" -> "https://host/properties/search").
    return httpx.URL(config.base_url).join(path)


async def _first_success(
    config: ApiConfig,
    paths: Iterable[str],
    params: Optional[Dict[str, str]] = None,
    *,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> UpstreamResult:
    """
    GET each candidate in order.

    2xx with a JSON body -> ok. 404 -> next. 401/403 -> stop, auth_required.
    Anything else (other status, network error, non-JSON body) is remembered
    as the last error and we move on.
    """
    last_error: Optional[str] = None

    # No timeout on the per-request path; a dead upstream just takes as long as it takes.
    async with httpx.AsyncClient(
        timeout=None,
        headers=_default_headers(config),
        follow_redirects=True,
        transport=transport,
    ) as client:
        for path in paths:
            try:
                url = _candidate_url(config, path)
                resp = await client.get(url, params=params)
            except (httpx.HTTPError, httpx.InvalidURL) as e:
                last_error = str(e) or e.__class__.__name__
                logger.debug("GET %s%s failed: %s", config.base_url, path, last_error)
                continue

            logger.debug("GET %s -> %s", resp.url, resp.status_code)

            if resp.is_success:
                try:
                    data = resp.json()
                except ValueError as e:
                    last_error = f"Invalid JSON from {resp.url}: {e}"
                    continue
                return UpstreamResult("ok", data=data, status_code=resp.status_code, url=str(resp.url))

            if resp.status_code == 404:
                continue

            if resp.status_code in AUTH_STATUSES:
                logger.warning("Marketplace API requires authentication (%s at %s)", resp.status_code, resp.url)
                return UpstreamResult(
                    "auth_required",
                    status_code=resp.status_code,
                    error="Authentication required",
                    url=str(resp.url),
                )

            last_error = f"HTTP {resp.status_code} from {resp.url}"

    return UpstreamResult("unavailable", error=last_error or "All endpoints failed")


# ---- Public API ----------------------------------------------------------------

async def search_listings(
    config: ApiConfig,
    params: SearchParams,
    *,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> UpstreamResult:
    """
    Try every search candidate with the (non-empty) filters as camelCase query params.
    """
    return await _first_success(
        config, config.search_paths, to_wire_params(params), transport=transport
    )


async def get_listing(
    config: ApiConfig,
    property_id: str,
    *,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> UpstreamResult:
    """Try every detail candidate with `{id}` filled in."""
    safe_id = quote(str(property_id), safe="")
    paths = [p.format(id=safe_id) for p in config.detail_paths]
    return await _first_success(config, paths, transport=transport)


async def check_health(
    config: ApiConfig,
    *,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> Optional[str]:
    """
    Probe `<base_url>/health`. Returns None when healthy, else an error message.
    """
    url = config.base_url.rstrip("/") + "/health"
    try:
        async with httpx.AsyncClient(
            timeout=config.health_timeout,
            headers=_default_headers(config),
            transport=transport,
        ) as client:
            resp = await client.get(url)
            resp.raise_for_status()
    except (httpx.HTTPError, httpx.InvalidURL) as e:
        return str(e) or e.__class__.__name__
    return None
