from datetime import UTC, datetime, timedelta

import mongomock
import pytest

from news_svc.adapters.mongo.repos import MongoPostRepo
from news_svc.domain.entities import Post
from news_svc.services.posts import PostService

# Oldest first: A..E
SEED_POSTS = [
    ("Intro to Python", "Variables and loops"),
    ("RESTful API", "Designing resources"),
    ("GraphQL API", "Schemas and resolvers"),
    ("Docker basics", "Containers and images"),
    ("Kubernetes", "Pods and deployments"),
]


class StepClock:
    """Deterministic clock that advances by a fixed step on every read."""

    def __init__(
        self,
        start: datetime | None = None,
        step: timedelta = timedelta(seconds=1),
    ) -> None:
        self._next = start or datetime(2024, 6, 15, 12, 0, 0, tzinfo=UTC)
        self.step = step

    def now_utc(self) -> datetime:
        current = self._next
        self._next += self.step
        return current


@pytest.fixture
def clock() -> StepClock:
    return StepClock()


@pytest.fixture
def frozen_clock() -> StepClock:
    """A clock that never advances, with a sub-millisecond component."""
    return StepClock(
        start=datetime(2024, 6, 15, 12, 0, 0, 500, tzinfo=UTC),
        step=timedelta(0),
    )


@pytest.fixture
def mongo_db():
    client = mongomock.MongoClient()
    yield client["news_test"]
    client.close()


@pytest.fixture
def post_repo(mongo_db, clock) -> MongoPostRepo:
    return MongoPostRepo(mongo_db, clock=clock, operation_timeout=5.0)


@pytest.fixture
def post_service(post_repo) -> PostService:
    return PostService(post_repo)


@pytest.fixture
def seeded_ids(post_repo) -> list[str]:
    """Create the five sample posts in order and return their ids (oldest first)."""
    return [post_repo.create(Post(title=t, content=c)) for t, c in SEED_POSTS]
