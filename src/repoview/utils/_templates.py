"""Jinja2 Environment for the templates shipped with repoview."""

from functools import cache

from jinja2 import Environment, PackageLoader, StrictUndefined, select_autoescape


@cache
def get_environment() -> Environment:
    """Get the shared Environment for ``repoview/templates``.

    ``.html`` templates are autoescaped; ``.txt`` templates (mail bodies)
    are not.
    """
    return Environment(
        loader=PackageLoader("repoview", "templates"),
        autoescape=select_autoescape(enabled_extensions=("html",)),
        undefined=StrictUndefined,
        keep_trailing_newline=True,
    )


def render_template(name: str, /, **context: object) -> str:
    """Render a packaged template by name."""
    return get_environment().get_template(name).render(**context)
