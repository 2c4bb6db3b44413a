import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from receivables.core import database
from receivables.core.config import settings
from receivables.core.errors import ReceivablesError
from receivables.routers import auth, dashboard, invoices, payments
from receivables.services.auth_service import AuthService

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

OPENAPI_TAGS = [
    {"name": "Auth", "description": "Log in and obtain a bearer token."},
    {"name": "Invoices", "description": "Create, list, edit and delete invoices."},
    {"name": "Payments", "description": "Pay an invoice through its payment link."},
    {"name": "Dashboard", "description": "Invoice statistics for the dashboard."},
]


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
    database.init_db()
    db = database.SessionLocal()
    try:
        AuthService(db).ensure_admin()
    finally:
        db.close()
    yield


app = FastAPI(
    title=settings.APP_NAME,
    version=settings.version,
    description="Accounts-receivable API: invoices, payment links and dashboard statistics.",
    openapi_tags=OPENAPI_TAGS,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        o.strip() for o in settings.CORS_ORIGINS.split(",") if o.strip()
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-Total-Count"],
)


def _error(status_code: int, message: str, headers: dict[str, str] | None = None) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message}, headers=headers)


@app.exception_handler(ReceivablesError)
async def receivables_error_handler(_request: Request, exc: ReceivablesError) -> JSONResponse:
    return _error(exc.status_code, exc.message)


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(_request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return _error(exc.status_code, str(exc.detail), getattr(exc, "headers", None))


def _describe_validation_error(err: dict[str, Any]) -> str:
    msg = str(err.get("msg", "Invalid value")).removeprefix("Value error, ")
    loc = [str(part) for part in err.get("loc", ()) if part not in ("body", "query", "path")]
    return f"{'.'.join(loc)}: {msg}" if loc else msg


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(
    _request: Request, exc: RequestValidationError
) -> JSONResponse:
    errors = exc.errors()
    message = _describe_validation_error(errors[0]) if errors else "Invalid request"
    return _error(400, message)


app.include_router(auth.router, prefix="/api/auth", tags=["Auth"])
app.include_router(invoices.router, prefix="/api/invoices", tags=["Invoices"])
app.include_router(payments.router, prefix="/api/payments", tags=["Payments"])
app.include_router(dashboard.router, prefix="/api/dashboard", tags=["Dashboard"])


@app.get("/")
async def root() -> dict[str, str]:
    return {
        "app": settings.APP_NAME,
        "version": settings.version,
        "domain": settings.APP_DOMAIN,
        "status": "running",
    }


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok"}
