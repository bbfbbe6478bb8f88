import asyncio
import logging
import uuid

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from clipper.api import download, health, info
from clipper.config.settings import config
from clipper.core.logging import setup_logging
from clipper.core.state import state
from clipper.i18n import i18n
from clipper.infra.http import close_http_client
from clipper.services.ytdlp import SubprocessExecutor, YTDLPCommandBuilder
from clipper.utils.locale import get_locale
from clipper.utils.scratch import sweep_stale_files

logger = logging.getLogger(__name__)

app = FastAPI(
    title=config.api.title,
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
    expose_headers=["Content-Disposition", "X-File-Size", "X-Request-ID"],
)

# Routes
app.include_router(health.router, tags=["Health"])
app.include_router(info.router, tags=["Info"])
app.include_router(download.router, tags=["Download"])


@app.middleware("http")
async def assign_request_id(request: Request, call_next):
    request_id = uuid.uuid4().hex[:12]
    request.state.request_id = request_id
    response = await call_next(request)
    response.headers["X-Request-ID"] = request_id
    return response


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": str(exc.detail)},
        headers=getattr(exc, "headers", None)
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    locale = get_locale(request.headers.get("accept-language"))
    return JSONResponse(
        status_code=400,
        content={"error": i18n.get("error.invalid_body", locale=locale)}
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.url.path}")
    locale = get_locale(request.headers.get("accept-language"))
    return JSONResponse(
        status_code=500,
        content={"error": i18n.get("error.internal", locale=locale)}
    )


@app.on_event("startup")
async def startup_event():
    setup_logging()

    removed = sweep_stale_files(config.download.temp_dir, config.download.stale_after_seconds)
    if removed:
        logger.info(f"Swept {removed} stale scratch file(s) from {config.download.temp_dir}")

    try:
        result = await SubprocessExecutor.run(YTDLPCommandBuilder.build_version_command(), timeout=10.0)
        if result.returncode == 0:
            state.ytdlp_version = result.stdout.decode().strip()
    except (OSError, asyncio.TimeoutError) as e:
        logger.warning(f"yt-dlp not available: {e}")

    logger.info(f"{config.api.title} {config.api.version} started (yt-dlp {state.ytdlp_version})")


@app.on_event("shutdown")
async def shutdown_event():
    await close_http_client()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=config.api.host, port=config.api.port)
