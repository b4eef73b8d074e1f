"""Commit comments: anchoring, rendering, storage and notification fan-out.

Classes:
    Comment: A stored comment.
    CommentAnchor: A parsed ``{side}L{line}`` anchor.
    CommentService: Creates and deletes comments, notifying watchers and
        mentioned accounts.
    CommentStore: Runtime-checkable protocol for persistence.
    MemoryCommentStore: In-memory store.
    SQLiteCommentStore: SQLite-backed store.
    NotificationFanout: Who gets notified about a comment.

Functions:
    extract_mentions: Mentioned handles in a text.
    render_comment: Safe HTML for comment content.
"""

from repoview.comments._anchor import ANCHOR_PATTERN, CommentAnchor, is_valid_anchor
from repoview.comments._mentions import MENTION_PATTERN, extract_mentions, split_mentions
from repoview.comments._models import Comment, NotificationFanout
from repoview.comments._render import render_comment
from repoview.comments._service import CommentService
from repoview.comments._store import CommentStore, MemoryCommentStore, SQLiteCommentStore

__all__ = [
    "ANCHOR_PATTERN",
    "MENTION_PATTERN",
    "Comment",
    "CommentAnchor",
    "CommentService",
    "CommentStore",
    "MemoryCommentStore",
    "NotificationFanout",
    "SQLiteCommentStore",
    "extract_mentions",
    "is_valid_anchor",
    "render_comment",
    "split_mentions",
]
