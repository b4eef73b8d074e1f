"""Render comment content to safe HTML."""

import re
from typing import Final

from markupsafe import Markup

from repoview.comments._mentions import split_mentions
from repoview.utils import render_template

_PARAGRAPH_BREAK: Final = re.compile(r"\n[ \t]*\n")


def render_comment(content: str, *, user_link: str = "") -> Markup:
    """Render raw comment content as HTML.

    Blank lines separate paragraphs, single newlines become ``<br>``, and
    mentions link to ``{user_link}/{handle}``. Everything else is escaped.

    Example:
        >>> render_comment("<b>hi</b> @alice")
        Markup('<p>&lt;b&gt;hi&lt;/b&gt; <a href="/alice" class="mention">@alice</a></p>\\n')
    """
    text = content.replace("\r\n", "\n").strip("\n")
    paragraphs = [
        [list(split_mentions(line)) for line in block.split("\n")]
        for block in _PARAGRAPH_BREAK.split(text)
        if block.strip()
    ]
    return Markup(  # noqa: S704
        render_template("comment.html", paragraphs=paragraphs, user_link=user_link)
    )
