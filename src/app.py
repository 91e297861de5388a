"""Bookstore FastAPI application.

Processes commands synchronously over HTTP inside the bookstore domain
context. PROTEAN_ENV selects the config overlay:
  - "test"/"development" → event_processing = "sync"  (handlers fire after commit)
  - "production"         → event_processing = "async" (handlers fire via the Engine)

Usage:
    uvicorn app:app --app-dir src --host 0.0.0.0 --port 8000 --reload
"""

from uuid import uuid4

from bookstore.domain import bookstore
from bookstore.utils.logging import add_context, clear_context
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

bookstore.init()

app = FastAPI(
    title="Bookstore API",
    description="Book catalogue, order placement and claim-code fulfillment",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def domain_context_middleware(request: Request, call_next):
    """Push the bookstore domain context and bind request details to the log context."""
    clear_context()
    add_context(
        request_id=request.headers.get("X-Request-Id") or uuid4().hex,
        path=request.url.path,
        member_id=request.headers.get("X-Member-Id"),
        staff_id=request.headers.get("X-Staff-Id"),
    )
    try:
        with bookstore.domain_context():
            return await call_next(request)
    finally:
        clear_context()


# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------
from bookstore.api import ROUTERS, register_error_handlers  # noqa: E402

for router in ROUTERS:
    app.include_router(router)

register_error_handlers(app)


@app.get("/health")
async def health():
    return JSONResponse(content={"status": "ok", "domain": bookstore.name})
