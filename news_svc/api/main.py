import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from news_svc.api.routes import health, posts
from news_svc.app_shell.config import get_settings
from news_svc.app_shell.context import AppContext

logger = logging.getLogger(__name__)


def create_app(context: AppContext | None = None) -> FastAPI:
    """
    Build the FastAPI application.

    With a prepared context the caller owns the database connection. Without
    one, the lifespan connects on startup and disconnects on shutdown.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        if context is not None:
            yield
            return

        owned = AppContext.create(get_settings())
        app.state.context = owned
        try:
            yield
        finally:
            owned.close()

    app = FastAPI(
        title="News Service",
        version="0.1.0",
        lifespan=lifespan,
        docs_url=None,
        redoc_url=None,
    )
    if context is not None:
        app.state.context = context

    app.include_router(health.router, tags=["Health"])
    app.include_router(posts.router, tags=["Posts"])

    return app
