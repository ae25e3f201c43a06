from fastapi import APIRouter
from fastapi.responses import PlainTextResponse

router = APIRouter()


@router.get("/ping", response_class=PlainTextResponse)
def ping() -> str:
    """Liveness probe."""
    return "pong"
