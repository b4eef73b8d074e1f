"""Line anchors for commit comments.

An anchor names a diff line as ``{side}L{line}``, both parts being ASCII
decimal numbers. The whole string must match; nothing else is accepted.
"""

import re
from dataclasses import dataclass
from typing import Final, Self

from repoview.exceptions import CommentValidationError

ANCHOR_PATTERN: Final = re.compile(r"[0-9]+L[0-9]+")


def is_valid_anchor(text: str) -> bool:
    """True if text is a well-formed anchor.

    Examples:
        >>> is_valid_anchor("0L10")
        True
        >>> is_valid_anchor("L5")
        False
        >>> is_valid_anchor(" 1L2")
        False
    """
    return ANCHOR_PATTERN.fullmatch(text) is not None


@dataclass(frozen=True, slots=True)
class CommentAnchor:
    """A parsed ``{side}L{line}`` anchor.

    ``str(anchor)`` returns the text it was parsed from, so leading zeros
    survive a round trip.
    """

    side: int
    line: int
    text: str

    @classmethod
    def parse(cls, text: str) -> Self:
        """Parse an anchor.

        Raises:
            CommentValidationError: If text is not a well-formed anchor.
        """
        if not is_valid_anchor(text):
            msg = f"Invalid line anchor: {text!r}"
            raise CommentValidationError(msg, field="line", value=text)
        side, line = text.split("L")
        try:
            return cls(side=int(side), line=int(line), text=text)
        except ValueError as e:
            # int() refuses digit strings past sys.get_int_max_str_digits()
            msg = f"Line anchor out of range: {text[:32]!r}"
            raise CommentValidationError(msg, field="line", value=text) from e

    def __str__(self) -> str:
        return self.text
