"""Notification sinks.

A sink receives activity events and outgoing mails. Delivery transport is
outside repoview: the JSONL sink hands mails to an outbox file that a mailer
process drains.
"""

from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Final, Protocol, runtime_checkable

import pendulum

from repoview.accounts import Account
from repoview.notifications._models import ActivityEvent, MailPayload
from repoview.utils import append_jsonl

if TYPE_CHECKING:
    from repoview.config import StorageConfig


@runtime_checkable
class NotificationSink(Protocol):
    """Receives activity events and notification mails."""

    def record_activity(self, event: ActivityEvent) -> None:
        """Record an event in the repository activity feed."""
        ...

    def send_mail(self, recipients: Sequence[Account], payload: MailPayload) -> None:
        """Send one mail to every recipient."""
        ...


@dataclass(slots=True)
class MemoryNotificationSink:
    """In-memory sink that keeps everything it receives."""

    events: list[ActivityEvent] = field(default_factory=list)
    mails: list[tuple[tuple[Account, ...], MailPayload]] = field(default_factory=list)

    def record_activity(self, event: ActivityEvent) -> None:
        self.events.append(event)

    def send_mail(self, recipients: Sequence[Account], payload: MailPayload) -> None:
        self.mails.append((tuple(recipients), payload))


class JsonlNotificationSink:
    """Sink appending events and mail envelopes to JSON Lines files.

    A channel whose path is None is discarded.

    Example:
        >>> sink = JsonlNotificationSink(Path("activity.jsonl"), Path("outbox.jsonl"))
        >>> sink.record_activity(event)
    """

    __slots__: Final = ("_activity_log", "_outbox")

    def __init__(self, activity_log: Path | None, outbox: Path | None) -> None:
        self._activity_log: Path | None = activity_log
        self._outbox: Path | None = outbox

    def record_activity(self, event: ActivityEvent) -> None:
        """Append the event to the activity log.

        Raises:
            OSError: If the log cannot be written.
        """
        if self._activity_log is None:
            return
        append_jsonl(self._activity_log, event.model_dump(mode="json"))

    def send_mail(self, recipients: Sequence[Account], payload: MailPayload) -> None:
        """Append a mail envelope to the outbox.

        Raises:
            OSError: If the outbox cannot be written.
        """
        if self._outbox is None:
            return
        append_jsonl(
            self._outbox,
            {
                "kind": payload.kind.value,
                "to": [account.email for account in recipients],
                "subject": payload.subject,
                "body": payload.body,
                "link": payload.link,
                "queued_at": pendulum.now("UTC").to_iso8601_string(),
            },
        )


def create_notification_sink(storage: "StorageConfig") -> NotificationSink:  # noqa: UP037
    """Build the sink configured by the ``[storage]`` section.

    Returns a JsonlNotificationSink when ``activity_log`` or ``outbox`` is
    set, and a MemoryNotificationSink otherwise.
    """
    activity_log = Path(storage.activity_log) if storage.activity_log else None
    outbox = Path(storage.outbox) if storage.outbox else None
    if activity_log is None and outbox is None:
        return MemoryNotificationSink()
    return JsonlNotificationSink(activity_log, outbox)
