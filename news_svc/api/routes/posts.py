"""
Post routes - server-rendered HTML with htmx fragment support.

Full-page vs fragment output is chosen once per request (RenderMode).
Mutating-form failures come back as HTTP 200 with the form fragment
carrying the error, so the front end can still swap it into place.
"""

import logging

from fastapi import APIRouter, Depends, Form, Response
from fastapi.responses import HTMLResponse, PlainTextResponse, RedirectResponse

from news_svc.api.deps import get_post_service, get_renderer
from news_svc.api.views import (
    CREATED_EVENT,
    CREATED_EVENT_HEADER,
    CreateFormData,
    EditFormData,
    ListPageData,
    RenderMode,
    get_render_mode,
    total_pages,
)
from news_svc.domain.entities import Post
from news_svc.domain.errors import (
    InvalidIdentifierError,
    PersistenceError,
    PostError,
    PostNotFoundError,
    PostValidationError,
)
from news_svc.ports.renderer import RendererPort
from news_svc.ports.service import PostServicePort

logger = logging.getLogger(__name__)

router = APIRouter()

LIST_DEFAULT_LIMIT = 3
SIDEBAR_RECENT_LIMIT = 5

# Errors a user can fix by editing the form.
_FORM_ERRORS = (PostValidationError, PostNotFoundError, InvalidIdentifierError)
_MISSING = (PostNotFoundError, InvalidIdentifierError)

_INT64_MAX = 2**63 - 1
_INT64_MIN = -(2**63)


def _parse_int(raw: str | None) -> int:
    """Parse a query number; anything unparseable or outside int64 counts as 0."""
    if raw is None:
        return 0
    try:
        value = int(raw.strip())
    except ValueError:
        return 0
    if not _INT64_MIN <= value <= _INT64_MAX:
        return 0
    return value


def _server_error(status_code: int) -> PlainTextResponse:
    return PlainTextResponse("server error", status_code=status_code)


def _recent_posts(service: PostServicePort) -> list[Post]:
    """Sidebar posts; a failure leaves the sidebar empty."""
    try:
        return service.get_recent(SIDEBAR_RECENT_LIMIT)
    except PostError as e:
        logger.warning("recent posts unavailable: %s", e)
        return []


@router.get("/")
def index() -> RedirectResponse:
    return RedirectResponse("/posts", status_code=303)


@router.get("/posts", response_class=HTMLResponse)
def list_posts(
    q: str = "",
    page: str | None = None,
    limit: str | None = None,
    service: PostServicePort = Depends(get_post_service),
    renderer: RendererPort = Depends(get_renderer),
    mode: RenderMode = Depends(get_render_mode),
) -> Response:
    page_no = _parse_int(page)
    if page_no < 1:
        page_no = 1
    page_size = _parse_int(limit)
    if page_size < 1:
        page_size = LIST_DEFAULT_LIMIT

    try:
        if q.strip():
            posts, total = service.search(q, page_no, page_size)
        else:
            posts, total = service.get_all(page_no, page_size)
    except PostError as e:
        logger.error("list error: %s", e)
        return _server_error(422)

    data = ListPageData(
        posts=posts,
        recent=_recent_posts(service),
        search=q,
        page=page_no,
        limit=page_size,
        total=total,
        total_pages=total_pages(total, page_size),
    )

    if mode is RenderMode.FRAGMENT:
        body = renderer.render("list", data) + renderer.render("pagination", data)
    else:
        body = renderer.render("base", data)
    return HTMLResponse(body)


@router.get("/posts/create", response_class=HTMLResponse)
def create_form(renderer: RendererPort = Depends(get_renderer)) -> HTMLResponse:
    return HTMLResponse(renderer.render("create_form", CreateFormData()))


@router.post("/posts", response_class=HTMLResponse)
def create_post(
    title: str = Form(""),
    content: str = Form(""),
    service: PostServicePort = Depends(get_post_service),
    renderer: RendererPort = Depends(get_renderer),
) -> Response:
    post = Post(title=title, content=content)

    try:
        post_id = service.create(post)
    except _FORM_ERRORS as e:
        logger.error("create error: %s", e)
        data = CreateFormData(title=title, content=content, error=str(e))
        return HTMLResponse(renderer.render("create_form", data))
    except PersistenceError as e:
        logger.error("create error: %s", e)
        return _server_error(500)

    try:
        created = service.get_by_id(post_id)
    except PostError as e:
        logger.error("create read-back error: %s", e)
        return _server_error(500)

    response = HTMLResponse(renderer.render("item", created))
    response.headers[CREATED_EVENT_HEADER] = CREATED_EVENT
    return response


@router.get("/posts/{post_id}", response_class=HTMLResponse)
def show_post(
    post_id: str,
    service: PostServicePort = Depends(get_post_service),
    renderer: RendererPort = Depends(get_renderer),
    mode: RenderMode = Depends(get_render_mode),
) -> Response:
    try:
        post = service.get_by_id(post_id)
    except _MISSING:
        return PlainTextResponse("404 page not found", status_code=404)
    except PostError as e:
        logger.error("show error: %s", e)
        return _server_error(422)

    if mode is RenderMode.FRAGMENT:
        return HTMLResponse(renderer.render("show", post))

    data = ListPageData(
        posts=[post],
        recent=_recent_posts(service),
        total=1,
        total_pages=1,
        paginate=False,
    )
    return HTMLResponse(renderer.render("base", data))


@router.get("/posts/{post_id}/edit", response_class=HTMLResponse)
def edit_form(
    post_id: str,
    service: PostServicePort = Depends(get_post_service),
    renderer: RendererPort = Depends(get_renderer),
) -> Response:
    try:
        post = service.get_by_id(post_id)
    except _MISSING:
        return PlainTextResponse("404 page not found", status_code=404)
    except PostError as e:
        logger.error("edit form error: %s", e)
        return _server_error(422)

    data = EditFormData(id=post.id or post_id, title=post.title, content=post.content)
    return HTMLResponse(renderer.render("edit_form", data))


@router.patch("/posts/{post_id}", response_class=HTMLResponse)
def update_post(
    post_id: str,
    title: str = Form(""),
    content: str = Form(""),
    service: PostServicePort = Depends(get_post_service),
    renderer: RendererPort = Depends(get_renderer),
) -> Response:
    post = Post(id=post_id, title=title, content=content)

    try:
        service.update(post)
    except _FORM_ERRORS as e:
        logger.error("update error: %s", e)
        data = EditFormData(id=post_id, title=title, content=content, error=str(e))
        return HTMLResponse(renderer.render("edit_form", data))
    except PersistenceError as e:
        logger.error("update error: %s", e)
        return _server_error(500)

    try:
        updated = service.get_by_id(post_id)
    except PostError as e:
        logger.error("update read-back error: %s", e)
        return _server_error(500)

    return HTMLResponse(renderer.render("item", updated))


@router.delete("/posts/{post_id}")
def delete_post(
    post_id: str,
    service: PostServicePort = Depends(get_post_service),
) -> Response:
    try:
        service.delete(post_id)
    except PostError as e:
        logger.error("delete error: %s", e)
        return Response(status_code=422)
    return Response(status_code=200)
