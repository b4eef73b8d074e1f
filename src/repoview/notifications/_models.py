"""Notification models."""

from dataclasses import dataclass
from typing import ClassVar

import pendulum
from pydantic import BaseModel, ConfigDict, Field

from repoview.enums import ActionType, MailKind


def _utc_now_iso() -> str:
    return pendulum.now("UTC").to_iso8601_string()


class ActivityEvent(BaseModel):
    """An entry in a repository's activity feed.

    Attributes:
        op_type: What happened.
        actor_id: Account that acted.
        repo_id: Repository the event belongs to.
        content: Event payload; for commit comments ``{sha}|{first line}``.
        created_at: ISO-8601 UTC timestamp.
    """

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True, extra="ignore")

    op_type: ActionType
    actor_id: int
    repo_id: int
    content: str
    created_at: str = Field(default_factory=_utc_now_iso)


@dataclass(frozen=True, slots=True)
class MailPayload:
    """Content of one notification mail.

    Attributes:
        kind: Watcher or mention notification.
        subject: Subject line.
        body: Plain-text body.
        link: URL of the comment.
    """

    kind: MailKind
    subject: str
    body: str
    link: str
