"""Diff views for single commits and commit ranges.

Classes:
    DiffEngine: Builds diff views.
    CommitDiffView: One commit's diff, parents and comments.
    RangeDiffView: Diff between two commits and the commits in between.
    CommentView: A comment prepared for display.
"""

from repoview.diff._engine import DiffEngine
from repoview.diff._models import CommentView, CommitDiffView, RangeDiffView

__all__ = [
    "CommentView",
    "CommitDiffView",
    "DiffEngine",
    "RangeDiffView",
]
