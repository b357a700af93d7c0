import logging
import logging.config

from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from pagewiki.config import get_settings
from pagewiki.dependencies import get_repository
from pagewiki.errors import NotFoundError, StorageError, ValidationError
from pagewiki.routers.attachments import router as attachments_router
from pagewiki.routers.pages import limiter, router as pages_router
from pagewiki.services.repository import PageRepository

logging.config.dictConfig(
    {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "json": {
                "format": '{"time": "%(asctime)s", "level": "%(levelname)s", "logger": "%(name)s", "message": "%(message)s"}',
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "json",
            },
        },
        "root": {"level": get_settings().log_level.upper(), "handlers": ["console"]},
    }
)

logger = logging.getLogger(__name__)

app = FastAPI(
    title="PageWiki",
    description="A minimal personal wiki: Markdown pages with attachments in a single embedded database.",
    version="1.0.0",
)

# Rate-limiting state
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)


@app.exception_handler(ValidationError)
async def validation_exception_handler(request: Request, exc: ValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message, "errors": exc.errors},
    )


@app.exception_handler(NotFoundError)
async def not_found_exception_handler(request: Request, exc: NotFoundError) -> JSONResponse:
    logger.warning("Not found for %s: %s", request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


@app.exception_handler(StorageError)
async def storage_exception_handler(request: Request, exc: StorageError) -> JSONResponse:
    # Already logged with its context where the fault was caught.
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": "The wiki store could not complete the request."},
    )


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled exception for %s", request.url)
    return JSONResponse(status_code=500, content={"detail": "An unexpected error occurred."})


app.include_router(pages_router)
app.include_router(attachments_router)


@app.get("/health", summary="Health check")
def health(repository: PageRepository = Depends(get_repository)) -> dict:
    return {"status": "ok" if repository.database.health_check() else "unavailable"}
