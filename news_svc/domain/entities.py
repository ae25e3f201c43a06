from datetime import datetime

from pydantic import BaseModel

from news_svc.domain.errors import PostValidationError, ValidationIssue

COLLECTION_NAME = "posts"


class Post(BaseModel):
    # Assigned by storage on first persist; hex string outside the adapter.
    id: str | None = None
    title: str = ""
    content: str = ""
    created_at: datetime | None = None
    updated_at: datetime | None = None


def validate_post_fields(post: Post) -> None:
    """
    Check the fields a caller supplies.

    Title is checked before content so an entirely empty post reports the
    title. Whitespace-only values count as empty.
    """
    if not post.title or not post.title.strip():
        raise PostValidationError(ValidationIssue.EMPTY_TITLE)
    if not post.content or not post.content.strip():
        raise PostValidationError(ValidationIssue.EMPTY_CONTENT)
