"""
FastAPI application factory
"""
import logging
import traceback

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse
from starlette.middleware.base import BaseHTTPMiddleware

from app.config import get_settings
from app.infrastructure.db.session import check_db_connection
from app.application.errors import AppError
from app.api.responses import error
from app.api.v1 import auth, transactions, categories, budgets, goals, users, export

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    """
    Application factory - builds and configures the FastAPI app

    Returns:
        Configured FastAPI app
    """
    settings = get_settings()

    app = FastAPI(
        title="Finance Tracker API",
        debug=settings.is_development,
    )

    # Error-logging middleware: catches ALL exceptions including sync routes
    class ErrorLoggingMiddleware(BaseHTTPMiddleware):
        async def dispatch(self, request, call_next):
            try:
                response = await call_next(request)
                return response
            except Exception as exc:
                tb_str = traceback.format_exc()
                logger.error(
                    f"\n{'='*60}\nERROR on {request.method} {request.url.path} "
                    f"(client={request.client.host if request.client else '-'}, "
                    f"ua={request.headers.get('user-agent', '-')})\n{tb_str}{'='*60}"
                )
                message = f"Internal Server Error: {exc}" if settings.is_development else "Internal Server Error"
                return error(message, 500, error_type="internal_error")

    # Rejects oversized bodies before they are read
    class BodySizeLimitMiddleware(BaseHTTPMiddleware):
        async def dispatch(self, request, call_next):
            length = request.headers.get("content-length")
            if length and length.isdigit() and int(length) > settings.MAX_BODY_BYTES:
                return error("Request body too large", 413, error_type="payload_too_large")
            return await call_next(request)

    app.add_middleware(BodySizeLimitMiddleware)
    app.add_middleware(ErrorLoggingMiddleware)

    # Middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.FRONTEND_URL],
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "PATCH"],
        allow_headers=["Content-Type", "Authorization"],
    )

    # Error handlers
    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        if exc.status_code >= 500:
            logger.error(f"{exc.__class__.__name__} on {request.method} {request.url.path}: {exc.message}")
        return error(exc.message, exc.status_code, error_type=exc.error_type, errors=exc.details)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        details = [
            {
                "field": ".".join(str(part) for part in err.get("loc", ()) if part != "body"),
                "message": err.get("msg", ""),
            }
            for err in exc.errors()
        ]
        return error("Validation Error", 400, error_type="validation_error", errors=details)

    # Routers
    app.include_router(auth.router)
    app.include_router(users.router)
    app.include_router(transactions.router)
    app.include_router(budgets.router)
    app.include_router(categories.router)
    app.include_router(goals.router)
    app.include_router(export.router)

    # Health checks
    @app.get("/health", response_class=PlainTextResponse, tags=["system"])
    def health():
        """Health check endpoint"""
        return "ok"

    @app.get("/ready", response_class=PlainTextResponse, tags=["system"])
    def ready():
        """Readiness check endpoint (checks the database)"""
        check_db_connection()
        return "ok"

    return app


# Create app instance
app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=get_settings().PORT,
        reload=get_settings().is_development,
    )
