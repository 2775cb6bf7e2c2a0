import re
import uuid
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from vidrelay.api import download, health, metadata, ui
from vidrelay.config.settings import config
from vidrelay.core.logging import log_error, log_warning, setup_logging
from vidrelay.services.ytdlp import detect_runtime
from vidrelay.utils.locale import get_locale
from vidrelay.i18n import i18n

app = FastAPI(
    title=config.api.title,
    description=config.api.description,
    version=config.api.version,
    docs_url="/docs" if config.api.debug else None,
    redoc_url=None
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.api.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

REQUEST_ID_PATTERN = re.compile(r"[A-Za-z0-9-]{1,64}")

@app.middleware("http")
async def assign_request_id(request: Request, call_next):
    # Client ids end up in log lines, so only short plain tokens are trusted
    request_id = request.headers.get("x-request-id", "")
    if not REQUEST_ID_PATTERN.fullmatch(request_id):
        request_id = uuid.uuid4().hex[:12]
    request.state.request_id = request_id
    response = await call_next(request)
    response.headers["X-Request-ID"] = request.state.request_id
    return response

@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code >= 500:
        log_error(request, f"{exc.status_code}: {exc.detail}")
    else:
        log_warning(request, f"{exc.status_code}: {exc.detail}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )

@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    log_error(request, f"Unhandled error: {exc!r}")
    locale = get_locale(request.headers.get("accept-language"))
    return JSONResponse(status_code=500, content={"error": i18n.get("error.internal", locale=locale)})

@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    log_warning(request, f"Invalid request: {exc.errors()}")
    return JSONResponse(status_code=400, content={"error": "Invalid request parameters"})

# Routes
app.include_router(health.router, tags=["Health"])
app.include_router(metadata.router, prefix="/api", tags=["Info"])
app.include_router(download.router, prefix="/api", tags=["Download"])
app.include_router(ui.router, tags=["UI"])

@app.on_event("startup")
async def startup_event():
    setup_logging()
    await detect_runtime()
