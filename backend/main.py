# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261017v1
# ---------------------------------------------------------------------------
"""
FastAPI application factory.

Responsibilities
----------------
* Instantiate the FastAPI app.
* Register CORS middleware and the error-envelope exception handlers.
* Mount the four feature routers (auth, users, guests, logs).
* Mount the built frontend so a single ``uvicorn`` process serves both the
  API and the registration form / admin dashboard.
* Expose a /health endpoint for container liveness checks.

Production note
---------------
CORS origins come from settings.cors_origins.  In a production deployment
set them to the exact frontend origin.
"""

import time
from pathlib import Path

from fastapi import FastAPI, Request
from starlette.middleware.base import BaseHTTPMiddleware
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import Response
from fastapi.staticfiles import StaticFiles

from auth.router import router as auth_router
from users.router import router as users_router
from guests.router import router as guests_router
from logs.router import router as logs_router
from core.config import settings
from core.errors import register_exception_handlers
from core.logger import logger
from core.security import get_client_ip

app = FastAPI(title="Hotel Check-in API", version="1.0.0")

# ---------------------------------------------------------------------------
# CORS
# ---------------------------------------------------------------------------
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "PATCH", "OPTIONS"],
    allow_headers=["Authorization", "Content-Type"],
)


# ---------------------------------------------------------------------------
# Request-logging middleware
# ---------------------------------------------------------------------------
# Logs every inbound request: method, path, client IP, status, latency.
# Request bodies (passwords, tokens) are NOT echoed – only the URL and
# metadata are recorded.


class _RequestLogMiddleware(BaseHTTPMiddleware):
    """Log method, path, client IP, response status and latency (ms)."""

    async def dispatch(self, request: Request, call_next) -> Response:
        start = time.perf_counter()
        response: Response = await call_next(request)
        elapsed_ms = (time.perf_counter() - start) * 1000

        logger.info(
            "%s %s | client=%s status=%d latency=%.1fms",
            request.method,
            request.url.path,
            get_client_ip(request),
            response.status_code,
            elapsed_ms,
        )
        return response


app.add_middleware(_RequestLogMiddleware)

# ---------------------------------------------------------------------------
# Error envelope
# ---------------------------------------------------------------------------
register_exception_handlers(app)

# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------
app.include_router(auth_router)
app.include_router(users_router)
app.include_router(guests_router)
app.include_router(logs_router)

# ---------------------------------------------------------------------------
# Health check
# ---------------------------------------------------------------------------


@app.on_event("startup")
async def _on_startup():
    logger.info("Hotel check-in service starting up")


@app.on_event("shutdown")
async def _on_shutdown():
    logger.info("Hotel check-in service shutting down")


@app.get("/health")
def health():
    return {"status": "ok"}


# ---------------------------------------------------------------------------
# Static files – frontend
# ---------------------------------------------------------------------------
# Mounted *after* the API routers so that /auth/*, /users/*, /guests/* and
# /logs/* are handled by FastAPI first.  ``html=True`` serves index.html for
# directory requests.
_FRONTEND_DIR = Path(__file__).resolve().parent.parent / "frontend" / "dist"

if _FRONTEND_DIR.is_dir():
    app.mount("/", StaticFiles(directory=str(_FRONTEND_DIR), html=True), name="frontend")
