import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from dishka import AsyncContainer
from dishka.integrations.fastapi import setup_dishka
from fastapi import APIRouter, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.ext.asyncio import AsyncEngine

from signup_guard.api import register_routers
from signup_guard.database.base import Base
from signup_guard.ioc import get_async_container
from signup_guard.services.logging import setup_logging
from signup_guard.settings import Config, get_config

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    # Import models so Base.metadata knows about them
    import signup_guard.api.modules.fraud.models  # noqa: F401

    container: AsyncContainer = app.state.dishka_container
    engine = await container.get(AsyncEngine)

    logger.info("Creating database tables...")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    logger.info("Starting application...")
    yield
    logger.info("Shutting down application...")
    await container.close()


def create_app(config: Config, container: AsyncContainer) -> FastAPI:
    setup_logging(config.env)

    app = FastAPI(
        title=config.api.title,
        version=config.api.version,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.api.allowed_hosts,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    api_router = APIRouter()
    register_routers(api_router)
    app.include_router(api_router)

    setup_dishka(container, app)

    return app


def get_production_app() -> FastAPI:
    """Get the FastAPI application instance."""
    config = get_config()
    return create_app(config, get_async_container(config))
