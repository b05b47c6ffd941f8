# src/fxconv/adapters/providers/exchangerate_api.py
"""
ExchangeRate-API Provider for Latest Conversion Rates

This module implements the ExchangeRate-API (v6) client. One GET request to
`<base_url>/<api_key>/latest/<BASE>` returns every supported currency quoted
against BASE. The JSON body is decoded into a typed pydantic model and turned
into a RateTable; every failure is reported as ProviderUnavailableError.

Files that USE this module:
- fxconv.app (builds the provider from the stored credential)
- fxconv.adapters.telegram.handlers (rebuilds the provider after /apikey)
- tests.test_providers (unit tests)

Files that this module USES:
- fxconv.adapters.providers.base (RateProvider interface)
- fxconv.config (settings for base URL and HTTP timeout)
- fxconv.domain (RateTable, errors)
"""
from __future__ import annotations

import logging
from typing import Dict, Optional

import requests
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from fxconv.adapters.providers.base import RateProvider
from fxconv.config import settings
from fxconv.domain.errors import (
    InvalidRateError,
    MissingCredentialError,
    ProviderUnavailableError,
)
from fxconv.domain.models import NOT_AVAILABLE, RateTable

log = logging.getLogger(__name__)


class LatestRatesResponse(BaseModel):
    """Body of a /latest/<BASE> response."""
    
    model_config = ConfigDict(extra="ignore", populate_by_name=True)
    
    result: str
    base_code: Optional[str] = None
    time_last_update_utc: Optional[str] = None
    time_next_update_utc: Optional[str] = None
    conversion_rates: Dict[str, float] = Field(default_factory=dict)
    error_type: Optional[str] = Field(default=None, alias="error-type")


class ExchangeRateAPIProvider(RateProvider):
    def __init__(self, api_key: str, base_url: Optional[str] = None, timeout: Optional[int] = None):
        """
        Initialize ExchangeRate-API provider.
        
        Args:
            api_key: ExchangeRate-API key (path segment of every request)
            base_url: Optional custom API root (defaults to settings.provider_base_url)
            timeout: Optional HTTP timeout in seconds (defaults to settings.http_timeout_seconds)
            
        Raises:
            MissingCredentialError: If the API key is empty
        """
        if not api_key or not api_key.strip():
            raise MissingCredentialError("ExchangeRate-API key is not configured.")
        self.api_key = api_key.strip()
        self.base_url = (base_url or settings.provider_base_url).rstrip("/")
        self.timeout = timeout or settings.http_timeout_seconds

    def _url(self, base: str) -> str:
        return f"{self.base_url}/{self.api_key}/latest/{base}"

    def _masked_url(self, base: str) -> str:
        # Keep the key out of logs
        return f"{self.base_url}/***/latest/{base}"

    def latest(self, base: str) -> RateTable:
        """
        Fetch the latest rates quoted against `base`.
        
        Returns:
            RateTable with every currency the provider returned
            
        Raises:
            ProviderUnavailableError: On timeout, network error, non-200 status,
                invalid JSON, unexpected schema, a non-"success" result, or an
                invalid rate value
        """
        log.info("Fetching exchange rates from %s", self._masked_url(base))
        try:
            resp = requests.get(
                self._url(base),
                headers={"Accept": "application/json"},
                timeout=self.timeout,
            )
        except requests.exceptions.Timeout as e:
            log.warning("ExchangeRate-API timeout after %d seconds", self.timeout)
            raise ProviderUnavailableError(f"ExchangeRate-API timeout after {self.timeout}s") from e
        except requests.exceptions.RequestException as e:
            log.warning("ExchangeRate-API request failed (network/connection error): %s", e)
            raise ProviderUnavailableError(f"ExchangeRate-API request failed: {e}") from e

        log.info("ExchangeRate-API response code: %d", resp.status_code)
        if resp.status_code != 200:
            log.warning("ExchangeRate-API HTTP error code: %d", resp.status_code)
            raise ProviderUnavailableError(f"ExchangeRate-API HTTP error code: {resp.status_code}")

        try:
            data = resp.json()
        except ValueError as e:
            log.error("ExchangeRate-API returned invalid JSON: %s", e)
            raise ProviderUnavailableError(f"ExchangeRate-API returned invalid JSON: {e}") from e

        try:
            payload = LatestRatesResponse.model_validate(data)
        except ValidationError as e:
            log.error("ExchangeRate-API unexpected schema: %s", e)
            raise ProviderUnavailableError(f"ExchangeRate-API schema error: {e}") from e

        if payload.result != "success":
            log.warning(
                "ExchangeRate-API reported failure: result=%s error-type=%s",
                payload.result, payload.error_type,
            )
            raise ProviderUnavailableError(
                f"ExchangeRate-API reported {payload.result}: {payload.error_type or 'unknown error'}"
            )

        if not payload.conversion_rates:
            log.error("ExchangeRate-API response has no conversion_rates")
            raise ProviderUnavailableError("ExchangeRate-API response missing 'conversion_rates'")

        if payload.base_code and payload.base_code.upper() != base.upper():
            log.error("ExchangeRate-API answered for %s instead of %s", payload.base_code, base)
            raise ProviderUnavailableError(
                f"ExchangeRate-API returned rates for {payload.base_code}, expected {base}"
            )

        try:
            table = RateTable(
                base=base,
                rates=payload.conversion_rates,
                last_updated=payload.time_last_update_utc or NOT_AVAILABLE,
                next_update=payload.time_next_update_utc or NOT_AVAILABLE,
            )
        except InvalidRateError as e:
            log.error("ExchangeRate-API returned an invalid rate: %s", e)
            raise ProviderUnavailableError(str(e)) from e

        log.info(
            "ExchangeRate-API returned %d rates for %s (last update: %s)",
            len(table), base, table.last_updated,
        )
        return table
