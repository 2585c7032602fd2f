import logging
from contextlib import asynccontextmanager
from pathlib import Path

import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from webproxy.api.routes import router
from webproxy.core.config import settings
from webproxy.core.errors import ProxyError
from webproxy.history import db as history_db
from webproxy.schemas import ErrorResponse

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.
    Initialize resources on startup, cleanup on shutdown.
    """
    logger.info("Initializing Web Proxy Viewer...")
    history_db.init_db()
    logger.info("History database initialized at %s", history_db.DATABASE_PATH)

    yield

    logger.info("Shutting down Web Proxy Viewer...")

app = FastAPI(
    title="Web Proxy Viewer",
    description="Fetch pages server-side and render them in-page with links routed back through the proxy",
    version="1.0.0",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)

def _error(status_code: int, error: str, details=None) -> JSONResponse:
    body = ErrorResponse(error=error, details=details).model_dump(exclude_none=True)
    return JSONResponse(status_code=status_code, content=body)

@app.exception_handler(ProxyError)
async def proxy_error_handler(request: Request, exc: ProxyError):
    logger.warning("Proxy error on %s: %s (%s)", request.url.path, exc.message, exc.details)
    return _error(exc.status_code, exc.message, exc.details)

@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    return _error(status.HTTP_400_BAD_REQUEST, "Invalid request body", str(exc.errors()))

@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return _error(exc.status_code, str(exc.detail))

@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s", request.url.path)
    return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error", type(exc).__name__)

# Include API routes
app.include_router(router)

def resolve_static_path(full_path: str) -> Path:
    """
    Map a request path to a file in the front-end bundle.
    Unknown paths fall back to index.html for client-side routing.
    """
    static_dir = Path(settings.STATIC_DIR).resolve()
    candidate = (static_dir / full_path).resolve()
    if full_path and static_dir in candidate.parents and candidate.is_file():
        return candidate
    return static_dir / "index.html"

@app.get("/{full_path:path}", include_in_schema=False)
async def frontend(full_path: str):
    """Serve the bundled front-end"""
    if full_path == "api" or full_path.startswith("api/"):
        return _error(status.HTTP_404_NOT_FOUND, "Not found")
    return FileResponse(resolve_static_path(full_path))

def run():
    uvicorn.run("webproxy.main:app", host=settings.HOST, port=settings.PORT)

if __name__ == "__main__":
    run()
