"""FastAPI dependencies for the webhook."""

import logging
from typing import Optional

from fastapi import Depends, HTTPException, status

from textask.config import Settings
from textask.integrations.coda import CodaClient
from textask.integrations.openai_client import OracleClient
from textask.integrations.rate_limiter import InMemoryRateLimiter

logger = logging.getLogger(__name__)

# Process-wide clients (singleton pattern)
_settings: Optional[Settings] = None
_oracle: Optional[OracleClient] = None
_rate_limiter: Optional[InMemoryRateLimiter] = None


def get_settings() -> Settings:
    """Get or load settings from the environment."""
    global _settings
    if _settings is None:
        _settings = Settings.from_env()
    return _settings


def get_oracle(settings: Settings = Depends(get_settings)) -> OracleClient:
    """Get or create the OpenAI oracle client."""
    global _oracle
    if _oracle is None:
        _oracle = OracleClient(
            api_key=settings.openai_api_key,
            model=settings.openai_model,
            timeout_sec=settings.oracle_timeout_sec,
        )
    return _oracle


def get_rate_limiter(settings: Settings = Depends(get_settings)) -> InMemoryRateLimiter:
    """Get or create the per-sender rate limiter."""
    global _rate_limiter
    if _rate_limiter is None:
        _rate_limiter = InMemoryRateLimiter(settings.rate_limit_max, settings.rate_limit_window_sec)
    return _rate_limiter


def get_coda_client(settings: Settings = Depends(get_settings)) -> CodaClient:
    """Create a Coda client for this request."""
    try:
        return CodaClient(settings)
    except ValueError:
        logger.error("Coda is not configured (CODA_API_KEY / DOC_ID missing)")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Service is not configured",
        )
