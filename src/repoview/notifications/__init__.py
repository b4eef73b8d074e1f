"""Activity events and notification mails.

Classes:
    ActivityEvent: Entry in a repository's activity feed.
    MailPayload: Content of one notification mail.
    NotificationSink: Runtime-checkable protocol for delivery.
    MemoryNotificationSink: Keeps events and mails in memory.
    JsonlNotificationSink: Appends events and mails to JSONL files.

Functions:
    build_comment_mail: Build the watcher or mention mail for a comment.
    create_notification_sink: Build the sink named by the storage config.
"""

from repoview.notifications._mail import build_comment_mail
from repoview.notifications._models import ActivityEvent, MailPayload
from repoview.notifications._sink import (
    JsonlNotificationSink,
    MemoryNotificationSink,
    NotificationSink,
    create_notification_sink,
)

__all__ = [
    "ActivityEvent",
    "JsonlNotificationSink",
    "MailPayload",
    "MemoryNotificationSink",
    "NotificationSink",
    "build_comment_mail",
    "create_notification_sink",
]
