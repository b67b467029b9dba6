import logging

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from .core.config import get_settings, Settings
from .core.logging import init_logging, request_context_middleware
from .core import errors
from .db import ExpenseStore, make_expense_store
from .db.seed import seed_demo_expenses
from .routers import health, expenses
from .services.auth import Authenticator, HttpAuthenticator
from .services.expense_service import ExpenseService


def create_app(
    settings_override: Settings | None = None,
    *,
    store: ExpenseStore | None = None,
    authenticator: Authenticator | None = None,
) -> FastAPI:
    """Application factory.

    settings_override: pass an already constructed Settings instance for tests
    to isolate environment (e.g., temp DB). Falls back to cached get_settings().
    store / authenticator: inject collaborators directly (tests use an
    in-memory store and a stub authenticator to avoid network I/O).
    """
    settings = settings_override or get_settings()
    # Initialize logging early
    init_logging(debug=settings.debug)

    if store is None:
        try:
            store = make_expense_store(settings)
        except Exception:
            # Failing to init the store is fatal; re-raise after logging
            logging.getLogger("expense_svc").exception(
                "failed to initialise expense store on startup"
            )
            raise
    if settings.seed_demo_data:
        added = seed_demo_expenses(store)
        logging.getLogger("expense_svc").info("seeded %d demo expenses", added)

    if authenticator is None:
        authenticator = HttpAuthenticator(
            settings.auth_validate_url, timeout=settings.auth_timeout_seconds
        )

    app = FastAPI(
        title=settings.app_name, debug=settings.debug, version=settings.version
    )
    app.state.settings = settings
    app.state.expense_service = ExpenseService(store, authenticator)

    # Middleware (request id / structured logging)
    app.middleware("http")(request_context_middleware)

    # Error handlers
    app.add_exception_handler(StarletteHTTPException, errors.http_error_handler)
    app.add_exception_handler(RequestValidationError, errors.validation_error_handler)
    app.add_exception_handler(errors.ExpenseServiceError, errors.service_error_handler)
    app.add_exception_handler(Exception, errors.server_error_handler)

    # Routers
    app.include_router(health.router)
    app.include_router(expenses.router)

    @app.get("/")
    async def root():
        return {"message": "Expense Service API", "version": settings.version}

    return app


def run() -> None:
    """Console entry point: serve the app with uvicorn."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "expense_svc.main:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        log_config=None,
    )
