"""View models handed to the templates, and the render mode selector."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum

from fastapi import Request

from news_svc.domain.entities import Post

PARTIAL_REQUEST_HEADER = "HX-Request"
CREATED_EVENT_HEADER = "HX-Trigger"
CREATED_EVENT = "postCreated"


class RenderMode(str, Enum):
    FULL = "full"
    FRAGMENT = "fragment"


def get_render_mode(request: Request) -> RenderMode:
    """Decide once per request whether to answer with a fragment or a full page."""
    if request.headers.get(PARTIAL_REQUEST_HEADER, "").lower() == "true":
        return RenderMode.FRAGMENT
    return RenderMode.FULL


def total_pages(total: int, limit: int) -> int:
    if limit <= 0:
        return 1
    return max(math.ceil(total / limit), 1)


@dataclass
class ListPageData:
    posts: list[Post] = field(default_factory=list)
    recent: list[Post] = field(default_factory=list)
    search: str = ""
    page: int = 1
    limit: int = 1
    total: int = 0
    total_pages: int = 1
    paginate: bool = True


@dataclass
class CreateFormData:
    title: str = ""
    content: str = ""
    error: str = ""


@dataclass
class EditFormData:
    id: str = ""
    title: str = ""
    content: str = ""
    error: str = ""
