"""Onboarding API built with FastAPI.

Wires the purchase order, payment and tokenization routers, the request id
and body size middleware, JSON logging and a health probe.
"""

from fastapi import FastAPI
from fastapi.responses import JSONResponse

from onboarding import database
from onboarding.logging_config import setup_logging
from onboarding.middleware import add_request_id, limit_api_size
from onboarding.orders.views import router as orders_router
from onboarding.payments.views import router as payments_router
from onboarding.tokenization.views import router as tokenization_router

setup_logging()

app = FastAPI(title="PayU Onboarding")
app.include_router(orders_router)
app.include_router(payments_router)
app.include_router(tokenization_router)

# last registered runs first
app.middleware("http")(limit_api_size)
app.middleware("http")(add_request_id)


@app.on_event("startup")
def _startup_db():
    database.init_db()


@app.get("/health")
def health():
    """Liveness/health probe; 503 when the database is unreachable."""
    db_ok = database.ping()
    return JSONResponse({"ok": db_ok, "components": {"db": {"ok": db_ok}}}, status_code=200 if db_ok else 503)
