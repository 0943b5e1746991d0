"""HTTP client for the PayU payments API with retries and circuit breakers.

This module implements the concrete gateway port using ``httpx``. It adds:

- Request correlation: propagates ``X-Request-ID`` from the ContextVar set by
    the HTTP middleware.
- Circuit breaker per gateway command family (payments, tokenization) to
    avoid hammering an unhealthy gateway, with a single HALF_OPEN probe once
    the reset timeout has elapsed.
- Retry policy with exponential backoff. Tokenization retries on transport
    errors and 5xx. Payment submission only retries when the connection
    could not be established, so a charge is never sent twice.
"""

import logging
import threading
import time
from enum import Enum
from typing import Callable, Optional

import httpx

from onboarding import settings
from onboarding.errors import UpstreamUnavailable
from onboarding.middleware import REQUEST_ID_CTX
from onboarding.tokenization.schemas import CreateTokenPayuRequest, CreateTokenPayuResponse
from .domain import PaymentGatewayPort
from .schemas import PaymentWithTokenPayuRequest, PaymentWithTokenPayuResponse

log = logging.getLogger(__name__)


# ---------------- Circuit Breaker ---------------- #

class BreakerState(str, Enum):
    CLOSED = "CLOSED"
    OPEN = "OPEN"
    HALF_OPEN = "HALF_OPEN"


class CircuitBreaker:
    """Circuit breaker guarding one gateway command family.

    ``fail_threshold`` consecutive failures open the circuit until
    ``reset_timeout`` seconds have passed. After that the circuit is
    HALF_OPEN: one probe call is let through and its outcome closes the
    circuit or opens it for another ``reset_timeout``.
    """

    def __init__(self, name: str, fail_threshold: int, reset_timeout: float):
        self.name = name
        self.fail_threshold = fail_threshold
        self.reset_timeout = reset_timeout
        self._mutex = threading.Lock()
        self._consecutive_failures = 0
        self._open_until: Optional[float] = None
        self._probing = False

    def _current(self) -> BreakerState:
        if self._open_until is None:
            return BreakerState.CLOSED
        if time.monotonic() < self._open_until:
            return BreakerState.OPEN
        return BreakerState.HALF_OPEN

    @property
    def state(self) -> str:
        with self._mutex:
            return self._current().value

    def before_call(self) -> str:
        """Admit a call, returning the state it runs under.

        Raises:
            UpstreamUnavailable: ``CIRCUIT_OPEN`` while open, ``CIRCUIT_HALF_OPEN_BUSY``
                when the probe slot is already taken.
        """
        with self._mutex:
            current = self._current()
            if current is BreakerState.OPEN:
                raise UpstreamUnavailable("CIRCUIT_OPEN")
            if current is BreakerState.HALF_OPEN:
                if self._probing:
                    raise UpstreamUnavailable("CIRCUIT_HALF_OPEN_BUSY")
                self._probing = True
            return current.value

    def on_success(self):
        with self._mutex:
            self._consecutive_failures = 0
            self._open_until = None
            self._probing = False

    def on_failure(self):
        """Count a failed call; a failed probe reopens the circuit at once."""
        with self._mutex:
            self._consecutive_failures += 1
            if self._current() is BreakerState.HALF_OPEN or self._consecutive_failures >= self.fail_threshold:
                self._open_until = time.monotonic() + self.reset_timeout
                self._probing = False
                log.warning("circuit opened",
                            extra={"circuit": self.name, "failures": self._consecutive_failures})

    def on_finish(self):
        with self._mutex:
            self._probing = False


def _breaker(name: str) -> CircuitBreaker:
    return CircuitBreaker(
        name,
        getattr(settings, "HTTP_CIRCUIT_FAIL_THRESHOLD", 5),
        getattr(settings, "HTTP_CIRCUIT_RESET_TIMEOUT", 30.0),
    )


_payments_cb = _breaker("payu-payments")
_tokenization_cb = _breaker("payu-tokenization")


# ---------------- Helpers ---------------- #

def _request_headers() -> dict:
    """Build JSON headers, adding ``X-Request-ID`` when one is in context.

    Breaker state and retry counts stay in the logs; PayU only gets the
    request id.
    """
    headers = {"Accept": "application/json", "Content-Type": "application/json"}
    rid = REQUEST_ID_CTX.get()
    if rid and rid != "-":
        headers["X-Request-ID"] = rid
    return headers


def _retry_policy():
    """Return retry configuration as (max_retries, backoff_base_seconds).

    ``max_retries`` counts attempts after the first one.
    """
    return (
        getattr(settings, "HTTP_RETRY_MAX", 3),
        getattr(settings, "HTTP_RETRY_BACKOFF_BASE", 0.15),
    )


def _backoff_delay(base: float, retry: int) -> float:
    return min(base * (2 ** (retry - 1)), getattr(settings, "HTTP_RETRY_MAX_SLEEP", 0.5))


def _should_retry(resp: Optional[httpx.Response], exc: Optional[Exception]) -> bool:
    """Retry on transport errors or HTTP 5xx."""
    if exc is not None:
        return True
    return resp is not None and resp.is_server_error


def _should_retry_unsent(resp: Optional[httpx.Response], exc: Optional[Exception]) -> bool:
    """Retry only when the request never reached the gateway."""
    return isinstance(exc, httpx.ConnectError)


# ---------------- PayU Adapter ---------------- #

class PayuClient(PaymentGatewayPort):
    """HTTP client for the PayU payments API (``service.cgi``)."""

    def __init__(self, url: str | None = None, timeout: float | None = None):
        self.url = url or settings.PAYU_PAYMENTS_URL
        self.timeout = timeout or settings.HTTP_TIMEOUT_SECS

    def submit_transaction(self, request: PaymentWithTokenPayuRequest) -> PaymentWithTokenPayuResponse:
        """Submit a ``SUBMIT_TRANSACTION`` command.

        Raises:
            UpstreamUnavailable: ``CIRCUIT_OPEN`` when the gateway is considered down.
            httpx.RequestError: For network/transport errors after retries.
            httpx.HTTPStatusError: For non-2xx responses.
        """
        data = self._post(request, _payments_cb, _should_retry_unsent)
        return PaymentWithTokenPayuResponse.model_validate(data)

    def create_token(self, request: CreateTokenPayuRequest) -> CreateTokenPayuResponse:
        """Submit a ``CREATE_TOKEN`` command.

        Raises:
            UpstreamUnavailable: ``CIRCUIT_OPEN`` when the gateway is considered down.
            httpx.RequestError: For network/transport errors after retries.
            httpx.HTTPStatusError: For non-2xx responses.
        """
        data = self._post(request, _tokenization_cb, _should_retry)
        return CreateTokenPayuResponse.model_validate(data)

    def _post(self, request, breaker: CircuitBreaker, retryable: Callable) -> dict:
        payload = request.model_dump(mode="json", by_alias=True, exclude_none=True)
        command = payload.get("command")
        max_retries, backoff = _retry_policy()
        circuit_state = breaker.before_call()
        headers = _request_headers()

        try:
            with httpx.Client(timeout=self.timeout) as client:
                for attempt in range(max_retries + 1):
                    if attempt:
                        time.sleep(_backoff_delay(backoff, attempt))
                    resp, exc = None, None
                    try:
                        resp = client.post(self.url, json=payload, headers=headers)
                    except httpx.RequestError as e:
                        exc = e
                    if resp is not None and resp.is_success:
                        breaker.on_success()
                        return resp.json()
                    if attempt < max_retries and retryable(resp, exc):
                        log.info("retrying gateway call",
                                 extra={"command": command, "retry": attempt + 1, "circuit_state": circuit_state})
                        continue

                    breaker.on_failure()
                    log.warning("gateway call failed",
                                extra={"command": command, "tries": attempt + 1, "circuit": breaker.name,
                                       "circuit_state": circuit_state})
                    if exc is not None:
                        raise exc
                    resp.raise_for_status()
        finally:
            breaker.on_finish()
        raise UpstreamUnavailable("GATEWAY_NO_RESPONSE")
