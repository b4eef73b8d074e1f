"""Enumeration types for repoview."""

from enum import IntEnum, StrEnum


class CommentType(IntEnum):
    """Kind of a stored comment."""

    COMMENT = 0
    SYSTEM = 1


class ActionType(StrEnum):
    """Repository activity event types."""

    COMMENT_COMMIT = "comment_commit"


class MailKind(StrEnum):
    """Notification mail categories."""

    WATCH = "watch"
    MENTION = "mention"
