# app/main.py
import logging

from fastapi import FastAPI
from fastapi import Request
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from .core.config import get_settings
from .core.errors import RelayError, UpstreamError
from .api import search as search_router
from .schemas.error import ErrorDetail, ErrorResponse

# ConfigurationError here stops the process before it serves anything
settings = get_settings()

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Goodreads Search Relay", version="0.1.0")

origins = [o.strip() for o in settings.cors_origins.split(",") if o.strip()]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins or ["*"],
    allow_methods=["GET", "OPTIONS"],
    allow_headers=["*"],
)

app.include_router(search_router.router)


@app.get("/health", tags=["meta"])
def health():
    return {"status": "ok", "environment": settings.environment}


# Global error handlers
@app.exception_handler(RelayError)
async def relay_exception_handler(request: Request, exc: RelayError):
    if isinstance(exc, UpstreamError):
        logger.error("Upstream failure on %s: %s", request.url.path, exc, exc_info=exc.__cause__)
    return JSONResponse(status_code=exc.status_code, content=exc.to_content())


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(error=str(exc.detail)).model_dump(exclude_none=True),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    details = [
        ErrorDetail(path=".".join(str(p) for p in err["loc"]), message=err["msg"], type=err["type"]).model_dump()
        for err in exc.errors()
    ]
    return JSONResponse(
        status_code=400,
        content=ErrorResponse(error="Invalid query parameters", details=details).model_dump(exclude_none=True),
    )
