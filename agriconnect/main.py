"""FastAPI application setup and error envelopes for AgriConnect Assist."""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from agriconnect.api import router as api_router
from agriconnect.config import Settings, settings as default_settings
from agriconnect.services import Services, build_services
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="agriconnect/main")


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "message": message})


def create_app(settings: Settings | None = None, services: Services | None = None) -> FastAPI:
    """Build the app; services (and the shared cache) are created once here unless injected."""
    settings = settings or default_settings
    app = FastAPI(title="AgriConnect Assist")
    app.state.services = services or build_services(settings)

    @app.exception_handler(StarletteHTTPException)
    async def http_error(_request: Request, exc: StarletteHTTPException):
        return _error(exc.status_code, str(exc.detail))

    @app.exception_handler(RequestValidationError)
    async def validation_error(_request: Request, exc: RequestValidationError):
        first = exc.errors()[0] if exc.errors() else {}
        where = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
        message = f"Invalid request: {where} {first.get('msg', '')}".strip()
        return _error(422, message)

    @app.exception_handler(Exception)
    async def unexpected_error(_request: Request, exc: Exception):
        logger.exception("Unhandled error", extra={"error": str(exc)})
        return _error(500, "Something went wrong, try again.")

    app.include_router(api_router, prefix="/api")
    return app


app = create_app()
