from typing import Protocol

from news_svc.domain.entities import Post


class PostRepoPort(Protocol):
    """Storage seam for posts. Pagination arguments arrive already normalized."""

    def create(self, post: Post) -> str:
        """Insert a post, stamping both timestamps. Returns the new id."""
        ...

    def get_all(self, page: int, limit: int) -> tuple[list[Post], int]:
        """Newest-first page of posts plus the unfiltered total."""
        ...

    def get_by_id(self, post_id: str) -> Post:
        ...

    def update(self, post: Post) -> None:
        """Replace title/content and refresh updated_at."""
        ...

    def delete(self, post_id: str) -> None:
        ...

    def search(self, query: str, page: int, limit: int) -> tuple[list[Post], int]:
        """Case-insensitive substring match on title or content, plus filtered total."""
        ...

    def get_recent(self, limit: int) -> list[Post]:
        ...
