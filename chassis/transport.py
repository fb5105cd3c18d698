"""
Transports for the model sync lifecycle.

A transport is any callable taking a request descriptor mapping
(``url``, ``dataType``, ``type``, ``data``, ``success``, ``error`` and
passthrough keys) that performs I/O and then invokes exactly one of
``success(response)`` / ``error(exc)`` exactly once.

  - HttpTransport: requests-backed HTTP, JSON or text bodies
  - QueueTransport: holds requests until the caller settles them
  - CallableTransport: adapts ``handler(SyncRequest) -> response``
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Optional, Protocol
from urllib.parse import urljoin

import requests
from pydantic import ValidationError

from .config import SETTINGS
from .models.request import SyncRequest

LOGGER = logging.getLogger(__name__)


# ------------------------------- Errors --------------------------------------


class ChassisError(Exception):
    """Base chassis error."""


class ConfigurationError(ChassisError):
    """Missing url/transport or a malformed request descriptor."""


class TransportError(ChassisError):
    """Catch-all transport failure."""

    def __init__(
        self,
        message: str,
        payload: Optional[object] = None,
        status: Optional[int] = None,
    ):
        super().__init__(message)
        self.payload = payload
        self.status = status


class HttpStatusError(TransportError):
    """HTTP status >= 400."""


class InvalidResponseError(TransportError):
    """Response body could not be decoded for the requested dataType."""


# ------------------------------- Protocol ------------------------------------


class Transport(Protocol):
    def __call__(self, options: Mapping[str, Any]) -> Any: ...


def _validate(options: Mapping[str, Any]) -> SyncRequest:
    try:
        return SyncRequest.from_options(options)
    except ValidationError as e:
        LOGGER.error("Rejected request descriptor: %s", e)
        raise ConfigurationError(f"Invalid request descriptor: {e}") from e


def _settle_error(request: SyncRequest, exc: TransportError) -> None:
    if request.error is not None:
        request.error(exc)


def _settle_success(request: SyncRequest, response: Any) -> None:
    if request.success is not None:
        request.success(response)


# ------------------------------- HTTP ----------------------------------------


class HttpTransport:
    """
    Blocking HTTP transport on a ``requests.Session``:
      - GET sends ``data`` as query params, other verbs as a JSON body
      - dataType "json" decodes the body, anything else returns text
      - callbacks run on the calling thread before ``__call__`` returns
    """

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        timeout: Optional[float] = None,
        base_url: Optional[str] = None,
    ):
        self._session = session if session is not None else requests.Session()
        self._timeout = timeout if timeout is not None else SETTINGS.http_timeout
        self._base_url = base_url
        LOGGER.debug("Initialized HttpTransport with base_url: %s", base_url)

    def _build_url(self, url: Optional[str]) -> str:
        if not url:
            raise ConfigurationError("Request descriptor has no url")
        if self._base_url:
            return urljoin(self._base_url.rstrip("/") + "/", url.lstrip("/"))
        return url

    def __call__(self, options: Mapping[str, Any]) -> None:
        request = _validate(options)
        url = self._build_url(request.url)
        kwargs: Dict[str, Any] = {
            "headers": request.headers,
            "timeout": request.timeout if request.timeout is not None else self._timeout,
        }
        if request.data is not None:
            if request.type == "GET":
                kwargs["params"] = request.data
            else:
                kwargs["json"] = request.data

        LOGGER.info("%s to %s", request.type, url)
        try:
            resp = self._session.request(request.type, url, **kwargs)
        except requests.RequestException as e:
            LOGGER.error("%s to %s failed: %s", request.type, url, e)
            _settle_error(request, TransportError(str(e)))
            return

        code = getattr(resp, "status_code", 0)
        LOGGER.debug("%s to %s returned status %d", request.type, url, code)
        if code >= 400:
            try:
                body = resp.json()
            except ValueError:
                body = getattr(resp, "text", None)
            LOGGER.error("%s to %s failed with code %d", request.type, url, code)
            _settle_error(
                request, HttpStatusError(f"HTTP {code}", payload=body, status=code)
            )
            return

        if request.data_type == "json":
            try:
                body = resp.json()
            except ValueError:
                LOGGER.error("Failed to parse JSON response from %s", url)
                _settle_error(
                    request,
                    InvalidResponseError(
                        "Invalid JSON response",
                        payload=getattr(resp, "text", None),
                        status=code,
                    ),
                )
                return
        else:
            body = resp.text

        _settle_success(request, body)


# ------------------------------- Queue ---------------------------------------


@dataclass(eq=False)
class PendingRequest:
    """A request held by :class:`QueueTransport` until it is settled."""

    options: Dict[str, Any]
    settled: bool = False
    outcome: Optional[str] = None

    @property
    def url(self) -> Optional[str]:
        return self.options.get("url")

    def _mark(self, outcome: str) -> None:
        if self.settled:
            raise ChassisError(f"Request to {self.url} already settled")
        self.settled = True
        self.outcome = outcome

    def respond(self, response: Any) -> None:
        self._mark("success")
        callback = self.options.get("success")
        if callback is not None:
            callback(response)

    def fail(self, error: Optional[BaseException] = None) -> None:
        self._mark("error")
        callback = self.options.get("error")
        if callback is not None:
            callback(error if error is not None else TransportError("Request failed"))


@dataclass
class QueueTransport:
    """
    Records every request and completes none of them on its own.

    Settle them in any order with :meth:`respond`/:meth:`fail` to drive the
    lifecycle deterministically (out-of-order responses, late failures).
    """

    pending: List[PendingRequest] = field(default_factory=list)
    history: List[PendingRequest] = field(default_factory=list)

    def __call__(self, options: Mapping[str, Any]) -> PendingRequest:
        request = PendingRequest(dict(options))
        LOGGER.debug("Queued request to %s", request.url)
        self.pending.append(request)
        self.history.append(request)
        return request

    def _take(self, index: int) -> PendingRequest:
        try:
            return self.pending.pop(index)
        except IndexError:
            raise ChassisError(f"No pending request at index {index}") from None

    def respond(self, response: Any, index: int = 0) -> PendingRequest:
        request = self._take(index)
        request.respond(response)
        return request

    def fail(self, error: Optional[BaseException] = None, index: int = 0) -> PendingRequest:
        request = self._take(index)
        request.fail(error)
        return request

    def respond_all(self, response: Any) -> int:
        count = 0
        while self.pending:
            self.respond(response)
            count += 1
        return count


# ------------------------------- Callable ------------------------------------


class CallableTransport:
    """Adapt ``handler(SyncRequest) -> response`` into a transport."""

    def __init__(self, handler: Callable[[SyncRequest], Any]):
        self._handler = handler

    def __call__(self, options: Mapping[str, Any]) -> None:
        request = _validate(options)
        try:
            response = self._handler(request)
        except TransportError as e:
            LOGGER.warning("Handler for %s failed: %s", request.url, e)
            _settle_error(request, e)
            return
        except Exception as e:
            LOGGER.warning("Handler for %s raised: %s", request.url, e)
            _settle_error(request, TransportError(str(e), payload=e))
            return
        _settle_success(request, response)


# ------------------------------- Default -------------------------------------

_default: Optional[Transport] = None


def default_transport() -> Transport:
    """Transport used by models that configure none; HTTP unless replaced."""
    global _default
    if _default is None:
        _default = HttpTransport()
    return _default


def set_default_transport(transport: Optional[Transport]) -> None:
    """Replace the process-wide fallback transport (None restores HTTP)."""
    global _default
    _default = transport


__all__ = [
    "ChassisError",
    "ConfigurationError",
    "TransportError",
    "HttpStatusError",
    "InvalidResponseError",
    "Transport",
    "HttpTransport",
    "QueueTransport",
    "PendingRequest",
    "CallableTransport",
    "default_transport",
    "set_default_transport",
]
