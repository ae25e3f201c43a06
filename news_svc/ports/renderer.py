from typing import Any, Protocol


class RendererPort(Protocol):
    def render(self, name: str, data: Any) -> str:
        """Render the named template (full page or fragment) to HTML."""
        ...
