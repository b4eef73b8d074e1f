"""Comment models."""

from dataclasses import dataclass
from typing import TYPE_CHECKING, ClassVar

import pendulum
from pydantic import BaseModel, ConfigDict, Field

from repoview.enums import CommentType

if TYPE_CHECKING:
    from repoview.accounts import Account


def _utc_now_iso() -> str:
    return pendulum.now("UTC").to_iso8601_string()


class Comment(BaseModel):
    """A review comment anchored to a line of a commit diff.

    Attributes:
        id: Store-assigned identifier; None until persisted.
        poster_id: Account id of the author.
        repo_id: Repository the commit belongs to.
        issue_id: Issue the comment belongs to, 0 for raw commit comments.
        commit_sha: Commented commit.
        line: Anchor text in ``{side}L{line}`` form.
        type: Plain or system-generated comment.
        content: Raw content as submitted.
        created_at: ISO-8601 UTC creation timestamp.
    """

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True, extra="ignore")

    id: int | None = None
    poster_id: int
    repo_id: int
    issue_id: int = 0
    commit_sha: str
    line: str
    type: CommentType = CommentType.COMMENT
    content: str
    created_at: str = Field(default_factory=_utc_now_iso)

    @property
    def summary(self) -> str:
        """First line of the content."""
        return self.content.split("\n", 1)[0]

    def link(self, repo_link: str) -> str:
        """URL of this comment on the commit page."""
        return f"{repo_link}/commit/{self.commit_sha}#comment-{self.id}"


@dataclass(frozen=True, slots=True)
class NotificationFanout:
    """Recipients of the notifications for one comment.

    Attributes:
        watchers: Repository watchers, excluding the author.
        mentioned: Mentioned accounts that are neither watchers nor the
            author. Unknown handles are not represented.
    """

    watchers: "tuple[Account, ...]" = ()  # noqa: UP037
    mentioned: "tuple[Account, ...]" = ()  # noqa: UP037

    @property
    def recipients(self) -> "tuple[Account, ...]":  # noqa: UP037
        """Everyone notified, watchers first."""
        return self.watchers + self.mentioned
