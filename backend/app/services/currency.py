# backend/app/services/currency.py

# Converts amounts into the base currency (INR) using a live rate table.
# One HTTP call per conversion, no caching. Any failure falls back to the
# original amount: a broken rate provider must never block an import.

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

import httpx
from fastapi import Depends

from app.core.config import Settings, get_settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Conversion:
    amount: float
    degraded: bool = False
    reason: Optional[str] = None


class RateClient:
    def __init__(self, url: str, timeout_ms: int = 8000, base_currency: str = "INR"):
        self.url = url
        self.timeout = timeout_ms / 1000
        self.base_currency = base_currency.upper()

    @classmethod
    def from_settings(cls, settings: Settings) -> "RateClient":
        return cls(
            url=settings.RATE_PROVIDER_URL,
            timeout_ms=settings.REQUEST_TIMEOUT_MS,
            base_currency=settings.BASE_CURRENCY,
        )

    async def fetch_rates(self) -> Dict[str, float]:
        """
        GET the rate table. Accepts the exchangerate-api v6 body
        ({"conversion_rates": {...}}) as well as a plain {"rates": {...}}.
        """
        if not self.url:
            raise ValueError("RATE_PROVIDER_URL is not configured")

        async with httpx.AsyncClient(timeout=self.timeout) as client:
            response = await client.get(self.url)
            response.raise_for_status()
            data = response.json()

        if not isinstance(data, dict):
            raise ValueError("rate provider returned a non-object body")
        rates = data.get("conversion_rates") or data.get("rates")
        if not isinstance(rates, dict):
            raise ValueError("rate provider response missing conversion_rates")
        return rates

    async def convert(self, amount: float, currency: str) -> Conversion:
        code = currency.strip().upper()
        if code == self.base_currency:
            return Conversion(amount)

        try:
            rates = await self.fetch_rates()
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning("Error fetching currency rates: %s", exc)
            return Conversion(amount, degraded=True, reason=str(exc))

        rate = _as_rate(rates.get(code))
        if rate is None:
            logger.warning("Exchange rate for %s not found", code)
            return Conversion(amount, degraded=True, reason=f"no rate for {code}")

        return Conversion(amount / rate)

    async def convert_to_base(self, amount: float, currency: str) -> float:
        return (await self.convert(amount, currency)).amount


def _as_rate(value: Any) -> Optional[float]:
    try:
        rate = float(value)
    except (TypeError, ValueError):
        return None
    return rate if rate > 0 else None


# FastAPI dependency; tests override it with a stub client.
def get_rate_client(settings: Settings = Depends(get_settings)) -> RateClient:
    return RateClient.from_settings(settings)
