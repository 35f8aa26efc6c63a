import logging
import logging.config
import sys
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from copycat import __version__
from copycat.config import settings
from copycat.errors import LaunchError
from copycat.routers import launch_router

# Keep the HTTP client quiet: its INFO lines include full URLs (and the trade API key)
logging.config.dictConfig({
    'version': 1,
    'disable_existing_loggers': False,
    'loggers': {
        'httpx': {'level': 'WARNING'},
        'httpcore': {'level': 'WARNING'},
    }
})

# === CONFIGURE ROOT LOGGER ===
logger = logging.getLogger()
logger.setLevel(settings.LOG_LEVEL.upper())

# Avoid duplicate handlers if reloaded
if logger.handlers:
    logger.handlers.clear()

# === 1. CONSOLE HANDLER ===
console_handler = logging.StreamHandler()
console_handler.setFormatter(logging.Formatter('%(asctime)s - %(levelname)s - %(message)s'))
logger.addHandler(console_handler)

# === 2. FILE HANDLER WITH DAILY ROTATION + KEEP 30 DAYS ===
if settings.LOG_DIR:
    LOG_DIR = Path(settings.LOG_DIR)
    LOG_DIR.mkdir(parents=True, exist_ok=True)
    file_handler = TimedRotatingFileHandler(
        filename=LOG_DIR / "app.log",
        when="midnight",
        interval=1,
        backupCount=30,
        encoding="utf-8"
    )
    file_handler.setFormatter(logging.Formatter(
        '%(asctime)s - %(name)s - %(funcName)s:%(lineno)d - %(levelname)s - %(message)s'
    ))
    logger.addHandler(file_handler)


def handle_exception(exc_type, exc_value, exc_traceback):
    if issubclass(exc_type, KeyboardInterrupt):
        sys.__excepthook__(exc_type, exc_value, exc_traceback)
        return
    logger.critical("Uncaught exception", exc_info=(exc_type, exc_value, exc_traceback))

sys.excepthook = handle_exception


CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "Content-Type, Authorization",
    "Access-Control-Allow-Methods": "POST, OPTIONS",
}

app = FastAPI(
    title="Launch Copycat API",
    description="Relaunch a token on pump.fun from an existing metadata URI.",
    version=__version__,
)


# Every response, errors included, carries the permissive CORS headers
@app.middleware("http")
async def add_cors_headers(request: Request, call_next):
    response = await call_next(request)
    response.headers.update(CORS_HEADERS)
    return response


@app.exception_handler(LaunchError)
async def launch_error_handler(request: Request, exc: LaunchError):
    return JSONResponse(status_code=exc.status_code, content=exc.to_payload())


# Framework errors (unknown path, any unrouted method) use the same {"error": ...} shape
@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    error = "Method not allowed" if exc.status_code == 405 else exc.detail
    return JSONResponse(status_code=exc.status_code, content={"error": error})


app.include_router(launch_router)


@app.get("/health")
async def health_check():
    return {
        "status": "healthy",
        "version": __version__,
        "ipfs_endpoint": settings.PUMP_IPFS_ENDPOINT,
        "trade_endpoint": settings.PUMP_TRADE_ENDPOINT,
        "trade_api_key_configured": bool(settings.PUMPPORTAL_API_KEY),
    }
