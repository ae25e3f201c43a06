from __future__ import annotations

import logging
from dataclasses import dataclass

from news_svc.adapters.clock import SystemClock
from news_svc.adapters.mongo.client import MongoDatabase
from news_svc.adapters.mongo.repos import MongoPostRepo
from news_svc.adapters.render.jinja_renderer import JinjaRenderer
from news_svc.app_shell.config import Settings
from news_svc.ports.renderer import RendererPort
from news_svc.ports.service import PostServicePort
from news_svc.services.posts import PostService

logger = logging.getLogger(__name__)


@dataclass
class AppContext:
    """Process-wide state, built once at startup and handed to the app."""

    settings: Settings
    post_service: PostServicePort
    renderer: RendererPort
    post_repo: MongoPostRepo | None = None
    database: MongoDatabase | None = None

    @classmethod
    def create(cls, settings: Settings) -> AppContext:
        database = MongoDatabase.connect(
            settings.mongo_uri,
            settings.mongo_name,
            timeout_seconds=settings.mongo_connect_timeout,
        )
        try:
            return cls.from_database(database, settings)
        except Exception:
            database.close()
            raise

    @classmethod
    def from_database(cls, database: MongoDatabase, settings: Settings) -> AppContext:
        post_repo = MongoPostRepo(
            database.instance(),
            clock=SystemClock(),
            operation_timeout=settings.mongo_operation_timeout,
        )
        post_repo.ensure_indexes()

        return cls(
            settings=settings,
            post_service=PostService(post_repo),
            renderer=JinjaRenderer(),
            post_repo=post_repo,
            database=database,
        )

    def close(self) -> None:
        if self.database is None:
            return
        self.database.close()
        self.database = None
        logger.info("disconnected from MongoDB")
