"""
Student Records - FastAPI Application Entry Point.

This is the main application module that:
1. Builds the FastAPI app with CORS middleware
2. Sets up structured JSON logging
3. Implements request ID middleware (X-Request-ID header)
4. Maps typed errors to HTTP responses (422, 404, 500)
5. Registers the Students API routes and a health check

The application follows a modular architecture:
- routes/: API endpoint handlers
- models/: SQLAlchemy ORM models
- services/: Validation, store adapter and resource operations
- client/: HTTP client, list view and form controller for the UI
- logging_config.py: Structured logging configuration
- database.py: Engine and session management
"""

import os
import time
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from student_records import __version__
from student_records.database import DATABASE_URL, build_engine, create_tables, make_session_factory
from student_records.errors import ValidationError
from student_records.logging_config import (
    setup_logging, get_logger, log_with_context,
    request_id_var, bind_request_id
)
from student_records.routes import students
from student_records.routes.students import NOT_FOUND_DETAIL

API_PREFIX = os.getenv("API_PREFIX", "/api")
CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]

# ──────────────────────────────────────────────────────────────
# Initialize structured logging BEFORE anything else
# ──────────────────────────────────────────────────────────────
setup_logging()
logger = get_logger("http")


def _field_errors(exc: RequestValidationError) -> dict:
    """Flatten request parsing errors into the {field: message} shape."""
    errors = {}
    for error in exc.errors():
        loc = error.get("loc", ())
        field = str(loc[1]) if len(loc) > 1 else "body"
        errors.setdefault(field, error.get("msg", "Invalid value"))
    return errors


def create_app(database_url: str = None) -> FastAPI:
    """
    Build the application around its own engine and session factory.

    Args:
        database_url: SQLAlchemy URL; defaults to the DATABASE_URL env var

    Returns:
        Configured FastAPI application
    """
    database_url = database_url or DATABASE_URL
    engine = build_engine(database_url)

    # Auto-create tables for SQLite; PostgreSQL uses the Alembic migration
    if database_url.startswith("sqlite"):
        log_with_context(logger, "INFO", "Using SQLite, creating tables directly")
        create_tables(engine)

    app = FastAPI(
        title="Student Records",
        description=(
            "Manage student records (personal and academic fields) "
            "through a small REST API."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc"
    )
    app.state.engine = engine
    app.state.session_factory = make_session_factory(engine)

    # ──────────────────────────────────────────────────────────────
    # CORS Middleware
    #
    # Allows the browser UI to call the API from another origin.
    # ──────────────────────────────────────────────────────────────
    app.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"]
    )

    # ──────────────────────────────────────────────────────────────
    # Request ID Middleware
    #
    # Generates a unique UUID per incoming request and:
    # 1. Binds it to the request_id context variable for the request's lifetime
    # 2. Returns it in the X-Request-ID response header
    # 3. Logs request start/end with latency measurement
    # ──────────────────────────────────────────────────────────────
    @app.middleware("http")
    async def request_id_middleware(request: Request, call_next):
        token = bind_request_id()
        req_id = request_id_var.get()
        start_time = time.time()

        log_with_context(logger, "INFO",
            f"Request started: {request.method} {request.url.path}",
            extra_data={
                "ip": request.client.host if request.client else "unknown",
                "user_agent": request.headers.get("user-agent", ""),
            })

        try:
            response = await call_next(request)

            duration_ms = (time.time() - start_time) * 1000
            response.headers["X-Request-ID"] = req_id

            log_with_context(logger, "INFO",
                f"Request completed: {request.method} {request.url.path} → {response.status_code}",
                extra_data={
                    "duration_ms": round(duration_ms, 2),
                    "status_code": response.status_code
                })
            return response
        finally:
            request_id_var.reset(token)

    # ──────────────────────────────────────────────────────────────
    # Error handlers
    # ──────────────────────────────────────────────────────────────
    @app.exception_handler(ValidationError)
    async def validation_error_handler(request: Request, exc: ValidationError):
        return JSONResponse(
            status_code=422,
            content={"message": exc.message, "errors": exc.errors},
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_error_handler(request: Request, exc: RequestValidationError):
        # A non-numeric id can never match a record
        if any(error.get("loc", ("",))[0] == "path" for error in exc.errors()):
            return JSONResponse(status_code=status.HTTP_404_NOT_FOUND,
                                content={"detail": NOT_FOUND_DETAIL})
        return JSONResponse(
            status_code=422,
            content={"message": "The given data was invalid.", "errors": _field_errors(exc)},
        )

    @app.exception_handler(Exception)
    async def global_error_handler(request: Request, exc: Exception):
        log_with_context(logger, "ERROR",
            f"Unhandled error on {request.method} {request.url.path}: {exc}",
            exc_info=True)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"message": "An unexpected error occurred. Please try again."},
        )

    # ──────────────────────────────────────────────────────────────
    # Register API routes
    # ──────────────────────────────────────────────────────────────
    app.include_router(students.router, prefix=API_PREFIX, tags=["Students"])

    @app.get("/health", tags=["Health"])
    def health_check():
        """Health check endpoint for container health checks and monitoring."""
        return {"status": "healthy", "service": "student-records", "version": __version__}

    @app.get("/", tags=["Root"])
    def root():
        """Root endpoint with API information."""
        return {
            "service": "Student Records",
            "version": __version__,
            "docs": "/docs",
            "health": "/health",
            "endpoints": {
                "list": f"GET {API_PREFIX}/students",
                "create": f"POST {API_PREFIX}/students",
                "detail": f"GET {API_PREFIX}/students/{{id}}",
                "update": f"PUT {API_PREFIX}/students/{{id}}",
                "delete": f"DELETE {API_PREFIX}/students/{{id}}"
            }
        }

    return app


app = create_app()
