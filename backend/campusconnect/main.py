# backend/campusconnect/main.py
import logging
import time

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from . import __version__, config
from .db import init_db
from .exceptions import CampusConnectError, UnexpectedError
from .logging_config import generate_request_id, request_id_var, setup_logging
from .routes import routers

setup_logging()
logger = logging.getLogger(__name__)

# ---- app instance ----
app = FastAPI(title=config.APP_NAME, version=__version__, description="CampusConnect API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    request_id = request.headers.get("X-Request-ID") or generate_request_id()
    token = request_id_var.set(request_id)
    started = time.perf_counter()
    try:
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.info("%s %s -> %s (%.1fms)", request.method, request.url.path, response.status_code, elapsed_ms)
        response.headers["X-Request-ID"] = request_id
        return response
    finally:
        request_id_var.reset(token)


# ---- error mapping: the only place that turns errors into status codes ----
_LOCATIONS = {"body", "query", "path", "header", "cookie", "form"}


def _field_errors(errors):
    out = []
    for err in errors:
        loc = [str(part) for part in err.get("loc", ())]
        if loc and loc[0] in _LOCATIONS:
            loc = loc[1:]
        out.append({"field": ".".join(loc), "message": err.get("msg", "Invalid value")})
    return out


@app.exception_handler(CampusConnectError)
async def campus_error_handler(request: Request, exc: CampusConnectError):
    if isinstance(exc, UnexpectedError):
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message, exc_info=exc)
    else:
        logger.info("%s %s rejected with %s: %s", request.method, request.url.path, exc.status_code, exc.message)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=400,
        content={"message": "Validation failed", "errors": _field_errors(exc.errors())},
    )


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(status_code=exc.status_code, content={"message": str(exc.detail)}, headers=exc.headers)


@app.exception_handler(Exception)
async def unexpected_error_handler(request: Request, exc: Exception):
    logger.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(status_code=500, content=UnexpectedError().to_dict())


# create tables on startup
@app.on_event("startup")
def on_startup():
    init_db()
    logger.info("%s %s started", config.APP_NAME, __version__)


# ---- simple endpoints ----
@app.get("/health")
@app.get("/api/health", include_in_schema=False)
def health():
    return {"status": "ok", "message": "CampusConnect API is running!"}


@app.get("/")
def root():
    return {"msg": "CampusConnect backend up. Visit /docs for API docs."}


for router in routers:
    app.include_router(router)
    # the web client calls everything under /api
    app.include_router(router, prefix="/api", include_in_schema=False)
