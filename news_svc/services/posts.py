"""
PostService - validation gate and pagination normalization for posts.

Pagination defaults live here rather than in storage so every storage
implementation sees identical, already-normalized arguments:

- page <= 0  -> 1
- limit <= 0 -> 10 for paged listing and search
- limit <= 0 -> 5 for the recent-posts sidebar

Storage errors pass through unchanged.
"""

from __future__ import annotations

from dataclasses import dataclass

from news_svc.domain.entities import Post, validate_post_fields
from news_svc.ports.repo import PostRepoPort

DEFAULT_PAGE = 1
DEFAULT_PAGE_LIMIT = 10
DEFAULT_RECENT_LIMIT = 5


@dataclass(frozen=True)
class PageRequest:
    page: int
    limit: int


def normalize_page(page: int, limit: int, default_limit: int = DEFAULT_PAGE_LIMIT) -> PageRequest:
    return PageRequest(
        page=page if page > 0 else DEFAULT_PAGE,
        limit=limit if limit > 0 else default_limit,
    )


def normalize_limit(limit: int, default_limit: int) -> int:
    return limit if limit > 0 else default_limit


class PostService:
    def __init__(self, repo: PostRepoPort):
        self.repo = repo

    def create(self, post: Post) -> str:
        validate_post_fields(post)
        return self.repo.create(post)

    def get_all(self, page: int, limit: int) -> tuple[list[Post], int]:
        req = normalize_page(page, limit)
        return self.repo.get_all(req.page, req.limit)

    def get_by_id(self, post_id: str) -> Post:
        return self.repo.get_by_id(post_id)

    def update(self, post: Post) -> None:
        validate_post_fields(post)
        self.repo.update(post)

    def delete(self, post_id: str) -> None:
        self.repo.delete(post_id)

    def search(self, query: str, page: int, limit: int) -> tuple[list[Post], int]:
        req = normalize_page(page, limit)
        return self.repo.search(query, req.page, req.limit)

    def get_recent(self, limit: int) -> list[Post]:
        return self.repo.get_recent(normalize_limit(limit, DEFAULT_RECENT_LIMIT))
