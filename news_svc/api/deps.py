from fastapi import Depends, Request

from news_svc.app_shell.context import AppContext
from news_svc.ports.renderer import RendererPort
from news_svc.ports.service import PostServicePort


def get_context(request: Request) -> AppContext:
    return request.app.state.context


def get_post_service(ctx: AppContext = Depends(get_context)) -> PostServicePort:
    return ctx.post_service


def get_renderer(ctx: AppContext = Depends(get_context)) -> RendererPort:
    return ctx.renderer
