# src/listings/config.py
"""
Runtime configuration, read once from the environment.

Build one `ApiConfig` at process start (the CLI calls `load_dotenv()` first,
so a `.env` file in the project root works too) and hand it to whatever
needs it. Nothing in the package reads os.environ after that.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Mapping, Optional, Tuple

DEFAULT_BASE_URL = "https://api.sakani.sa/api/v1"
DEFAULT_SITE_URL = "https://sakani.sa"
DEFAULT_USER_AGENT = "Mozilla/5.0 (compatible; listings-search/0.1)"

# Guessed REST shapes, tried in order. The upstream schema was never
# confirmed, so these are configuration rather than protocol.
SEARCH_PATHS: Tuple[str, ...] = (
    "/properties/search",
    "/marketplace/search",
    "/listings/search",
    "/api/properties",
    "/api/marketplace",
    "/public/properties",
    "/public/marketplace",
    "/guest/properties",
    "/v1/properties",
    "/v1/marketplace",
)

DETAIL_PATHS: Tuple[str, ...] = (
    "/properties/{id}",
    "/marketplace/{id}",
    "/listings/{id}",
    "/api/properties/{id}",
    "/api/marketplace/{id}",
    "/public/properties/{id}",
    "/public/marketplace/{id}",
    "/guest/properties/{id}",
    "/v1/properties/{id}",
    "/v1/marketplace/{id}",
)


def _env_flag(value: Optional[str]) -> bool:
    """Case-insensitive "true", surrounding whitespace ignored; anything else is False."""
    return (value or "").strip().lower() == "true"


@dataclass(frozen=True)
class ApiConfig:
    base_url: str = DEFAULT_BASE_URL
    api_key: Optional[str] = None
    api_token: Optional[str] = None
    use_mock_data: bool = False
    site_url: str = DEFAULT_SITE_URL
    user_agent: str = DEFAULT_USER_AGENT
    search_paths: Tuple[str, ...] = field(default=SEARCH_PATHS)
    detail_paths: Tuple[str, ...] = field(default=DETAIL_PATHS)
    # simulated latency in mock-only mode, seconds
    mock_search_delay: float = 0.5
    mock_detail_delay: float = 0.3
    health_timeout: float = 5.0

    @property
    def guest_mode(self) -> bool:
        """True when no credential is configured at all."""
        return not self.api_key and not self.api_token

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "ApiConfig":
        env = os.environ if environ is None else environ
        return cls(
            base_url=env.get("SAKANI_API_BASE_URL") or DEFAULT_BASE_URL,
            api_key=env.get("SAKANI_API_KEY") or None,
            api_token=env.get("SAKANI_API_TOKEN") or None,
            use_mock_data=_env_flag(env.get("USE_MOCK_DATA")),
            site_url=env.get("SAKANI_SITE_URL") or DEFAULT_SITE_URL,
        )
