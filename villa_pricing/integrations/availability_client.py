"""HTTP client for the availability and rates provider."""

from __future__ import annotations

import datetime
import logging
from typing import Any

import httpx
from pydantic import ValidationError

from villa_pricing.core.config import get_settings
from villa_pricing.schemas.availability import AvailabilityPayload
from villa_pricing.services.stay_dates import coerce_date

logger = logging.getLogger(__name__)


class AvailabilityClientError(RuntimeError):
    """Raised when the provider cannot supply a usable payload."""


class AvailabilityClient:
    """Fetches booked dates and per-date rates for a property."""

    def __init__(
        self,
        base_url: str,
        *,
        api_token: str | None = None,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        if not base_url:
            raise AvailabilityClientError("Provider base URL is not configured")
        headers = {"Accept": "application/json"}
        if api_token:
            headers["Authorization"] = f"Bearer {api_token}"
        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            headers=headers,
            timeout=timeout,
            transport=transport,
        )

    async def __aenter__(self) -> AvailabilityClient:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def fetch_availability(
        self,
        property_slug: str,
        *,
        check_in: datetime.date | str,
        check_out: datetime.date | str,
        guest_count: int,
    ) -> AvailabilityPayload:
        """Return the provider payload for a property and stay window."""
        params = {
            "check_in": coerce_date(check_in).isoformat(),
            "check_out": coerce_date(check_out).isoformat(),
            "guest_count": str(guest_count),
        }
        path = f"/properties/{property_slug}/availability-and-rates"
        try:
            response = await self._client.get(path, params=params)
        except httpx.HTTPError as exc:
            logger.error(
                "Availability request failed",
                extra={"property_slug": property_slug, "error": str(exc)},
            )
            raise AvailabilityClientError(f"Availability request failed: {exc}") from exc

        if response.status_code >= 400:
            message = _error_message(response)
            logger.error(
                "Availability provider returned an error",
                extra={
                    "property_slug": property_slug,
                    "status_code": response.status_code,
                    "error": message,
                },
            )
            raise AvailabilityClientError(
                f"Availability provider returned {response.status_code}: {message}"
            )

        try:
            body = response.json()
        except ValueError as exc:
            raise AvailabilityClientError("Availability response is not JSON") from exc
        if not isinstance(body, dict):
            raise AvailabilityClientError("Availability response must be an object")
        if body.get("success") is False:
            raise AvailabilityClientError(
                body.get("message") or "Availability provider reported a failure"
            )

        try:
            return AvailabilityPayload.model_validate(body)
        except ValidationError as exc:
            raise AvailabilityClientError(f"Invalid availability payload: {exc}") from exc


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text[:200]
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return response.reason_phrase


def build_availability_client(**overrides: Any) -> AvailabilityClient:
    """Factory that honours application settings; explicit overrides win."""
    settings = get_settings()

    def _pick(name: str, default: Any) -> Any:
        value = overrides.get(name)
        return default if value is None else value

    return AvailabilityClient(
        _pick("base_url", settings.provider_base_url),
        api_token=_pick("api_token", settings.provider_api_token),
        timeout=_pick("timeout", settings.provider_timeout_seconds),
        transport=overrides.get("transport"),
    )
