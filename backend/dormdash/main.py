import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from dormdash.core.config import get_settings
from dormdash.core.database import Base, engine
from dormdash.core.errors import DormDashError
from dormdash.core.logging_config import configure_logging
from dormdash.models import listing, review, user, user_session  # noqa: F401 (register tables)
from dormdash.routers import auth, health, listings, profile, reviews

logger = logging.getLogger("dormdash.app")


def _validation_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    # drop the "body"/"query"/"path" prefix
    field = ".".join(str(part) for part in first.get("loc", ())[1:])
    return f"{field}: {first.get('msg')}" if field else str(first.get("msg"))


async def handle_domain_error(request: Request, exc: DormDashError):
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})


async def handle_validation_error(request: Request, exc: RequestValidationError):
    return JSONResponse(status_code=400, content={"detail": _validation_message(exc)})


async def handle_store_error(request: Request, exc: SQLAlchemyError):
    logger.exception("store error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


def create_app() -> FastAPI:
    settings = get_settings()
    configure_logging(settings.log_level)

    # --- Create DB tables ---
    Base.metadata.create_all(bind=engine)

    app = FastAPI(title=settings.app_name)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(DormDashError, handle_domain_error)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(SQLAlchemyError, handle_store_error)

    # --- Routers ---
    app.include_router(health.router)
    app.include_router(auth.router)
    app.include_router(auth.api_router)
    app.include_router(profile.router)
    app.include_router(listings.router)
    app.include_router(listings.form_router)
    app.include_router(reviews.router)
    app.include_router(reviews.user_router)

    @app.get("/")
    def root():
        return {"message": f"{settings.app_name} backend is running"}

    logger.info("%s started (env=%s)", settings.app_name, settings.app_env)
    return app


app = create_app()
