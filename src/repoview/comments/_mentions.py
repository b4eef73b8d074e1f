"""Mention extraction.

A mention is ``@`` followed by a handle, at the start of the text or after
whitespace. ``user@example.com`` is therefore not a mention. A handle never
ends with a dot, so ``thanks @alice.`` mentions ``alice``.
"""

import re
from collections.abc import Iterator
from typing import Final, Literal

MENTION_PATTERN: Final = re.compile(r"(?:^|(?<=\s))@([0-9A-Za-z_.]*[0-9A-Za-z_])")

type Segment = tuple[Literal["text", "mention"], str]


def extract_mentions(content: str) -> tuple[str, ...]:
    """Extract mentioned handles, in order of first appearance.

    Handles keep the case they were written in; exact duplicates are dropped.

    Examples:
        >>> extract_mentions("hello @alice @alice")
        ('alice',)
        >>> extract_mentions("cc @bob, mail bob@example.com")
        ('bob',)
    """
    return tuple(dict.fromkeys(m.group(1) for m in MENTION_PATTERN.finditer(content)))


def split_mentions(text: str) -> Iterator[Segment]:
    """Split text into plain text and mention segments.

    Mention segments carry the bare handle.

    Example:
        >>> list(split_mentions("hi @alice!"))
        [('text', 'hi '), ('mention', 'alice'), ('text', '!')]
    """
    position = 0
    for match in MENTION_PATTERN.finditer(text):
        if match.start() > position:
            yield "text", text[position : match.start()]
        yield "mention", match.group(1)
        position = match.end()
    if position < len(text):
        yield "text", text[position:]
