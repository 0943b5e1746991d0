"""HTTP middleware that assigns and propagates a request identifier.

Every incoming request receives a request id, read from the ``X-Request-ID``
header when the client sends one or generated (UUIDv4) otherwise. The id is
stored on ``request.state`` and in ``REQUEST_ID_CTX`` so code running
downstream (gateway clients, log filters) can reach it without passing it
around. The response carries the same id in ``X-Request-ID``.

A second middleware rejects oversized ``/api/`` bodies with 413.
"""

import contextvars
import logging
import uuid

from fastapi import Request
from fastapi.responses import JSONResponse

from onboarding import settings

REQUEST_ID_CTX = contextvars.ContextVar("request_id", default="-")
RESPONSE_HEADER = "X-Request-ID"

log = logging.getLogger("onboarding.access")


async def add_request_id(request: Request, call_next):
    rid = request.headers.get(RESPONSE_HEADER) or str(uuid.uuid4())
    request.state.request_id = rid
    token = REQUEST_ID_CTX.set(rid)
    try:
        response = await call_next(request)
        log.info("request handled", extra={"path": request.url.path, "method": request.method,
                                           "status": response.status_code})
    finally:
        REQUEST_ID_CTX.reset(token)
    response.headers[RESPONSE_HEADER] = rid
    return response


async def limit_api_size(request: Request, call_next):
    if request.url.path.startswith("/api/"):
        clen = request.headers.get("content-length")
        if clen and clen.isdigit() and int(clen) > getattr(settings, "API_MAX_BYTES", 1024 * 1024):
            return JSONResponse({"detail": "PAYLOAD_TOO_LARGE"}, status_code=413)
    return await call_next(request)
