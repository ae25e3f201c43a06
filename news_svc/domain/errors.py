"""
Post error taxonomy.

Storage translates driver failures into these; the service passes them
through unchanged and the HTTP layer maps them onto status codes.
"""

from __future__ import annotations

from enum import Enum


class PostError(Exception):
    """Base class for all post operation failures."""


class ValidationIssue(str, Enum):
    EMPTY_TITLE = "empty_title"
    EMPTY_CONTENT = "empty_content"


_ISSUE_MESSAGES: dict[ValidationIssue, str] = {
    ValidationIssue.EMPTY_TITLE: "post title cannot be empty",
    ValidationIssue.EMPTY_CONTENT: "post content cannot be empty",
}


class PostValidationError(PostError):
    """Raised when a post fails field validation. Never reaches storage."""

    def __init__(self, issue: ValidationIssue) -> None:
        self.issue = issue
        super().__init__(_ISSUE_MESSAGES[issue])


class InvalidIdentifierError(PostError):
    """Raised when an identifier cannot be decoded into a storage id."""

    def __init__(self, identifier: object) -> None:
        self.identifier = identifier
        super().__init__(f"invalid post id: {identifier!r}")


class PostNotFoundError(PostError):
    """Raised when get/update/delete addresses a post that does not exist."""

    def __init__(self, identifier: str | None = None) -> None:
        self.identifier = identifier
        super().__init__("post not found")


class PersistenceError(PostError):
    """Underlying storage failure. The driver exception is chained as __cause__."""
