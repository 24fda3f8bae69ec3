import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.error_handlers import register_error_handlers
from app.api.v1.admin import router as admin_router
from app.api.v1.waitlist import router as waitlist_router
from app.api.v1.waitlist import utc_timestamp
from app.core.config import Settings, settings as default_settings
from app.core.errors import StoreUnavailableError
from app.core.logging_setup import setup_logging
from app.db.session import MongoConnection, get_connection
from app.schemas.waitlist import HealthResponse

logger = logging.getLogger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    connection: Optional[MongoConnection] = None,
) -> FastAPI:
    """
    Build the API for either deployment mode.

    server:      connect eagerly in lifespan; a failed connect aborts startup
    serverless:  connect on the first request that needs the store, retrying
                 on later requests if it fails
    """
    settings = settings or default_settings
    connection = connection or MongoConnection.from_settings(settings)
    setup_logging(settings.LOG_LEVEL, settings.LOG_FORMAT)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if not settings.lazy_connect:
            await connection.connect()
        yield
        connection.close()

    app = FastAPI(
        title="Waitlist API",
        version="1.0.0",
        description="Email waitlist: sign up, check, stats, admin listing.",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.mongo = connection
    app.state.lazy_connect = settings.lazy_connect

    register_error_handlers(app)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type"],
    )

    app.include_router(waitlist_router, prefix="/api")
    app.include_router(admin_router,    prefix="/api")

    @app.get("/api/health", response_model=HealthResponse, tags=["meta"])
    async def health_check(mongo: MongoConnection = Depends(get_connection)):
        if settings.lazy_connect and not mongo.is_connected:
            try:
                await mongo.connect()
            except StoreUnavailableError:
                logger.warning("Health check could not reach MongoDB")
        return HealthResponse(
            timestamp=utc_timestamp(),
            database="Connected" if mongo.is_connected else "Disconnected",
        )

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=default_settings.HOST, port=default_settings.PORT)
