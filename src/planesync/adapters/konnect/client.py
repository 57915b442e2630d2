"""HTTP client for the remote control-plane API."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from pydantic import ValidationError

from planesync.adapters.http_resilience import ResilienceConfig, ResilientClient
from planesync.config import KonnectConfig, get_konnect_config

from .schema import EntityResponse, ErrorResponse

if TYPE_CHECKING:
    from collections.abc import Callable
    from types import TracebackType

    import httpx

    from planesync.adapters.http_resilience import RequestOptions

    from .schema import KonnectBaseModel

log = getLogger(__name__)


def _default_client_factory(config: ResilienceConfig) -> ResilientClient:
    return ResilientClient(config)


class KonnectAPIError(RuntimeError):
    """Raised when the remote API rejects a request or cannot be addressed."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


@dataclass(slots=True)
class KonnectClient:
    """Synchronous facade over one pooled, rate-limited ``ResilientClient``.

    Requests run on a private event loop that lives until ``close``, so the
    connection pool and the rate limiter are shared by every call.
    """

    config: KonnectConfig = field(default_factory=get_konnect_config)
    client_factory: Callable[[ResilienceConfig], ResilientClient] = field(
        default=_default_client_factory
    )
    _runner: asyncio.Runner | None = field(default=None, init=False, repr=False)
    _http: ResilientClient | None = field(default=None, init=False, repr=False)

    @property
    def base_url(self) -> str:
        return self.config.base_url

    def __enter__(self) -> KonnectClient:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def close(self) -> None:
        runner, self._runner = self._runner, None
        http, self._http = self._http, None
        if runner is None:
            return
        try:
            if http is not None:
                runner.run(http.aclose())
        finally:
            runner.close()

    def send(
        self,
        method: str,
        path: str,
        *,
        payload: KonnectBaseModel | None = None,
        timeout: float | None = None,
        missing_ok: bool = False,
    ) -> EntityResponse | None:
        """Perform one request and return the parsed entity, if the answer carries one.

        With ``missing_ok`` a ``404`` answer yields ``None`` instead of an error.
        """

        if self._runner is None:
            self._runner = asyncio.Runner()
        return self._runner.run(
            self._send_async(
                method,
                path,
                payload=payload,
                timeout=timeout,
                missing_ok=missing_ok,
            )
        )

    async def _send_async(
        self,
        method: str,
        path: str,
        *,
        payload: KonnectBaseModel | None,
        timeout: float | None,
        missing_ok: bool,
    ) -> EntityResponse | None:
        options: RequestOptions = {}
        if payload is not None:
            options["json"] = payload.model_dump(mode="json", exclude_none=True)
        if timeout is not None:
            options["timeout"] = timeout

        if self._http is None:
            self._http = self.client_factory(self.config.resilience)
        response = await self._http.request(method, path, **options)
        return self._handle_response(method, path, response, missing_ok=missing_ok)

    @staticmethod
    def _handle_response(
        method: str,
        path: str,
        response: httpx.Response,
        *,
        missing_ok: bool,
    ) -> EntityResponse | None:
        if response.status_code == 404 and missing_ok:
            log.debug(f"{method} {path}: already absent remotely")
            return None

        if response.is_error:
            message = _error_message(response)
            log.error(f"Remote API error {response.status_code} on {method} {path}: {message}")
            raise KonnectAPIError(
                f"{method} {path} returned {response.status_code}: {message}",
                status_code=response.status_code,
            )

        if response.status_code == 204 or not response.content:
            return None

        try:
            return EntityResponse.model_validate(response.json())
        except (ValueError, ValidationError) as exc:
            raise KonnectAPIError(
                f"Unexpected response payload for {method} {path}",
                status_code=response.status_code,
            ) from exc


def _error_message(response: httpx.Response) -> str:
    try:
        error = ErrorResponse.model_validate(response.json())
    except (ValueError, ValidationError):
        return response.text or response.reason_phrase
    return error.describe() or response.reason_phrase
