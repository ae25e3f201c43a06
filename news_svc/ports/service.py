from typing import Protocol

from news_svc.domain.entities import Post


class PostServicePort(Protocol):
    """The post operations as seen by the HTTP layer."""

    def create(self, post: Post) -> str:
        ...

    def get_all(self, page: int, limit: int) -> tuple[list[Post], int]:
        ...

    def get_by_id(self, post_id: str) -> Post:
        ...

    def update(self, post: Post) -> None:
        ...

    def delete(self, post_id: str) -> None:
        ...

    def search(self, query: str, page: int, limit: int) -> tuple[list[Post], int]:
        ...

    def get_recent(self, limit: int) -> list[Post]:
        ...
