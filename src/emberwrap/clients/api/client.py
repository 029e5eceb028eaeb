from __future__ import annotations

from typing import Any, Dict, Optional

import httpx

from emberwrap.clients.api.types import JSON_CONTENT_TYPE, ApiConnection, HttpMethod
from emberwrap.core.exceptions import EnvelopeFormatError
from emberwrap.core.logger import get_logger
from emberwrap.formatter import EmberJsonFormatter


class EnvelopeApiClient:
    """
    HTTP client for APIs that speak the Ember envelope convention.

    Request bodies go through :meth:`EmberJsonFormatter.write_payload` and
    responses through :meth:`EmberJsonFormatter.read_payload`, so callers work
    with plain domain objects on both sides.
    """

    def __init__(
        self,
        formatter: EmberJsonFormatter,
        connection: ApiConnection,
        *,
        client: Optional[httpx.Client] = None,
    ):
        self.formatter = formatter
        self.connection = connection
        self.log = get_logger(f"emberwrap.{self.__class__.__name__}")

        self._client = client or httpx.Client(
            base_url=connection.base_url,
            timeout=connection.timeout_seconds,
            headers=connection.request_headers(),
        )

    def get(self, endpoint: str, target_type: Any, *, params: Optional[Dict[str, Any]] = None) -> Any:
        resp = self._client.request("GET", endpoint, params=params)
        return self._read(resp, target_type)

    def send(
        self,
        method: HttpMethod,
        endpoint: str,
        value: Any,
        declared_type: Any = object,
        target_type: Optional[Any] = None,
    ) -> Any:
        """Send ``value`` as the request body; parse the response when ``target_type`` is given."""
        body = self.formatter.dumps(value, declared_type)
        resp = self._client.request(
            method,
            endpoint,
            content=body,
            headers={"Content-Type": JSON_CONTENT_TYPE},
        )
        if target_type is None:
            resp.raise_for_status()
            return None
        return self._read(resp, target_type)

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "EnvelopeApiClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:  # type: ignore
        self.close()

    def _read(self, resp: httpx.Response, target_type: Any) -> Any:
        resp.raise_for_status()
        try:
            return self.formatter.read_unwrapped(target_type, resp.content)
        except (ValueError, EnvelopeFormatError):
            # Log the actual response to help debug, then let the error through
            preview = resp.content[:500]
            content_type = resp.headers.get("content-type", "unknown")
            self.log.error(
                f"Failed to read API response as {target_type!r}. "
                f"Status: {resp.status_code}, Content-Type: {content_type}. "
                f"Response preview: {preview!r}"
            )
            raise
