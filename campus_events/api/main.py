import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from campus_events import __version__
from campus_events.core.config import get_settings
from campus_events.core.errors import CampusEventsError, ValidationError
from campus_events.core.logger import setup_logger
from campus_events.api.schemas.common import ErrorResponse
from campus_events.api.routers import auth, events, approvals, announcements, notices, users, health

settings = get_settings()

setup_logger(settings)
logger = logging.getLogger(__name__)

app = FastAPI(
    title=settings.app_name,
    description="Campus event proposals, approvals and notice board",
    version=__version__,
    docs_url="/docs" if settings.debug else None,
    redoc_url="/redoc" if settings.debug else None,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"] if settings.debug else settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(CampusEventsError)
async def campus_events_error_handler(request: Request, exc: CampusEventsError):
    """Render domain errors with their HTTP status and machine code."""
    body = ErrorResponse(
        error=exc.code,
        detail=exc.message,
        fields=exc.errors if isinstance(exc, ValidationError) else None,
    )
    logger.info("%s %s -> %d %s", request.method, request.url.path, exc.status_code, exc.code)
    return JSONResponse(status_code=exc.status_code, content=body.model_dump(exclude_none=True))


# Include routers
app.include_router(auth.router, prefix="/api")
app.include_router(events.router, prefix="/api")
app.include_router(approvals.router, prefix="/api")
app.include_router(announcements.router, prefix="/api")
app.include_router(notices.router, prefix="/api")
app.include_router(users.router, prefix="/api")
app.include_router(health.router)


@app.get("/")
async def root():
    return {
        "name": settings.app_name,
        "version": __version__,
        "docs": "/docs" if settings.debug else None,
    }
