from typing import Any

from jinja2 import Environment, PackageLoader, StrictUndefined, select_autoescape


def create_environment() -> Environment:
    return Environment(
        loader=PackageLoader("news_svc", "templates"),
        autoescape=select_autoescape(["html"]),
        undefined=StrictUndefined,
        trim_blocks=True,
        lstrip_blocks=True,
    )


class JinjaRenderer:
    """Renders `<name>.html` from the bundled templates with the view model bound as `data`."""

    def __init__(self, env: Environment | None = None):
        self.env = env or create_environment()

    def render(self, name: str, data: Any) -> str:
        template = self.env.get_template(f"{name}.html")
        return template.render(data=data)
