"""HTTP implementation of the climate service transport."""

from __future__ import annotations

import csv
import gzip
import io
from datetime import datetime
from typing import Any

import httpx

from climaseries.core.config import TransportConfig
from climaseries.core.data.sources import Row, read_csv_records
from climaseries.core.data.transport.base import ClimateTransport
from climaseries.core.exceptions import NetworkError, TransportError
from climaseries.core.logging import get_logger
from climaseries.core.models import Location, TimeStep
from climaseries.core.patterns import ExponentialBackoffRetry, RetryConfig

logger = get_logger(__name__)

RETRY_ON_STATUS = frozenset({429, 500, 502, 503, 504})


def _format_time(moment: datetime) -> str:
    return moment.isoformat(timespec="seconds")


def _retry_after(response: httpx.Response) -> float | None:
    # only the delay-seconds form of Retry-After is honoured
    value = response.headers.get("Retry-After")
    if value is None:
        return None
    try:
        return max(0.0, float(value))
    except ValueError:
        return None


class HttpClimateTransport(ClimateTransport):
    """Talks to the climate web service over HTTP.

    Record streams are served as CSV (optionally gzip compressed), metadata
    as JSON. Retryable failures (timeouts, connection errors, 429 and 5xx)
    are retried with exponential backoff; everything else surfaces as
    :class:`TransportError` right away.
    """

    name = "climate-web-service"

    def __init__(
        self,
        config: TransportConfig | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.config = config or TransportConfig()
        self._client = client
        self._owns_client = client is None
        self._retry_config = RetryConfig(
            max_attempts=max(1, self.config.max_retries + 1),
            base_delay=self.config.backoff_factor,
            max_delay=self.config.max_backoff,
        )

    async def __aenter__(self) -> HttpClimateTransport:
        self._ensure_client()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()

    def _ensure_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.config.base_url,
                timeout=httpx.Timeout(self.config.timeout),
                follow_redirects=True,
                headers={"User-Agent": self.config.user_agent},
            )
            self._owns_client = True
        return self._client

    async def aclose(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def _send(self, path: str, params: dict[str, Any]) -> httpx.Response:
        client = self._ensure_client()
        try:
            response = await client.get(path, params={k: v for k, v in params.items() if v is not None})
        except httpx.TimeoutException as exc:
            raise NetworkError(f"timeout requesting {path}", self.name, {"path": path}) from exc
        except httpx.TransportError as exc:
            raise NetworkError(f"cannot reach service for {path}: {exc}", self.name, {"path": path}) from exc

        if response.status_code >= 400:
            raise TransportError(
                f"request {path} failed with status {response.status_code}",
                self.name,
                status_code=response.status_code,
                retryable=response.status_code in RETRY_ON_STATUS,
                details={"path": path},
                retry_after=_retry_after(response),
            )
        return response

    async def _get(self, path: str, **params: Any) -> httpx.Response:
        retry = ExponentialBackoffRetry(self._retry_config)
        try:
            return await retry.execute(self._send, path, params)
        except TransportError as exc:
            logger.warning(
                "climate service request failed",
                path=path,
                error_code=exc.error_code,
                **retry.get_stats(),
            )
            raise

    async def _get_rows(self, path: str, **params: Any) -> list[Row]:
        response = await self._get(path, **params)
        try:
            return list(read_csv_records(io.BytesIO(response.content)))
        except (UnicodeDecodeError, csv.Error, gzip.BadGzipFile, EOFError) as exc:
            raise TransportError(f"unreadable CSV from {path}", self.name, details={"path": path}) from exc

    async def _get_json(self, path: str, **params: Any) -> Any:
        response = await self._get(path, **params)
        try:
            return response.json()
        except ValueError as exc:
            raise TransportError(f"invalid JSON from {path}", self.name, details={"path": path}) from exc

    async def list_climates(self, tag: str | None = None) -> list[Row]:
        return await self._get_rows("/climates", tag=tag)

    async def fetch_climate_by_id(
        self,
        data_obj_id: str,
        start: datetime,
        end: datetime,
        step: TimeStep,
    ) -> list[Row]:
        return await self._get_rows(
            f"/climates/{data_obj_id}/data",
            start=_format_time(start),
            end=_format_time(end),
            step=TimeStep(step).value,
        )

    async def fetch_climate_by_location_tag(
        self,
        location: Location,
        tag: str | None,
        start: datetime,
        end: datetime,
        step: TimeStep,
    ) -> list[Row]:
        return await self._get_rows(
            "/climates/nearest",
            lon=location.lon,
            lat=location.lat,
            tag=tag,
            start=_format_time(start),
            end=_format_time(end),
            step=TimeStep(step).value,
        )

    async def fetch_base_data(self, data_obj_id: str) -> dict[str, Any]:
        payload = await self._get_json(f"/climates/{data_obj_id}")
        if not isinstance(payload, dict):
            raise TransportError(f"unexpected base data for {data_obj_id}", self.name)
        return payload

    async def fetch_altitude(self, location: Location) -> float:
        payload = await self._get_json("/altitude", lon=location.lon, lat=location.lat)
        try:
            return float(payload["altitude"])
        except (KeyError, TypeError, ValueError) as exc:
            raise TransportError("altitude missing in service response", self.name) from exc
