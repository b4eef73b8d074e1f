"""Comment creation and deletion with notification fan-out.

Creating a comment runs a fixed sequence of stages. Each stage fails with its
own exception type, so a caller can tell "nothing happened" apart from
"comment saved, notifications incomplete":

1. validate     -> CommentValidationError (nothing stored)
2. persist      -> CommentPersistenceError (nothing stored, nothing sent)
3. activity     -> DeliveryError(stage="activity")
4. watchers     -> DeliveryError(stage="watchers")
5. mentions     -> DeliveryError(stage="mentions")

A stored comment is never rolled back.
"""

from collections.abc import Iterator
from contextlib import contextmanager
from typing import TYPE_CHECKING

from repoview.accounts import Account, AccountDirectory
from repoview.comments._anchor import CommentAnchor
from repoview.comments._mentions import extract_mentions
from repoview.comments._models import Comment, NotificationFanout
from repoview.comments._store import CommentStore
from repoview.enums import ActionType, MailKind
from repoview.exceptions import (
    CommentAuthorizationError,
    CommentPersistenceError,
    CommentValidationError,
    DeliveryError,
)
from repoview.notifications import ActivityEvent, NotificationSink, build_comment_mail
from repoview.utils import create_null_logger

if TYPE_CHECKING:
    from structlog.typing import FilteringBoundLogger

    from repoview.config import BrowserConfig


class CommentService:
    """Creates and deletes commit comments.

    Example:
        >>> service = CommentService(store, directory, sink, BrowserConfig())
        >>> comment = service.create_commit_comment(
        ...     author_id=1, repo_id=7, commit_sha=sha, anchor="0L10", content="LGTM"
        ... )
    """

    def __init__(  # noqa: PLR0913
        self,
        store: CommentStore,
        accounts: AccountDirectory,
        sink: NotificationSink,
        config: "BrowserConfig",  # noqa: UP037
        *,
        logger: "FilteringBoundLogger | None" = None,  # noqa: UP037
    ) -> None:
        self._store: CommentStore = store
        self._accounts: AccountDirectory = accounts
        self._sink: NotificationSink = sink
        self._config: BrowserConfig = config
        self._logger: FilteringBoundLogger = logger or create_null_logger()

    # =========================================================================
    # Create
    # =========================================================================

    def create_commit_comment(  # noqa: PLR0913
        self,
        author_id: int,
        repo_id: int,
        commit_sha: str,
        anchor: str,
        content: str,
        *,
        repo_link: str = "",
    ) -> Comment:
        """Store a comment on a commit line and notify interested accounts.

        Args:
            author_id: Account posting the comment.
            repo_id: Repository the commit belongs to.
            commit_sha: Commented commit.
            anchor: Line anchor in ``{side}L{line}`` form.
            content: Raw comment content; must not be empty.
            repo_link: Base URL of the repository, used in mail links.

        Returns:
            The stored comment.

        Raises:
            CommentValidationError: If content is empty or anchor is malformed.
            CommentPersistenceError: If the store fails.
            DeliveryError: If a notification stage fails after the comment
                was stored. ``error.comment`` is the stored comment.
        """
        if not content:
            msg = "Comment content is empty"
            raise CommentValidationError(msg, field="content", value=content)
        parsed = CommentAnchor.parse(anchor)

        draft = Comment(
            poster_id=author_id,
            repo_id=repo_id,
            commit_sha=commit_sha,
            line=str(parsed),
            content=content,
        )
        try:
            comment = self._store.insert(draft)
        except Exception as e:  # noqa: BLE001
            self._logger.exception(
                "comment_persist_failed", commit_sha=commit_sha, repo_id=repo_id
            )
            msg = f"Failed to store comment on {commit_sha}: {e}"
            raise CommentPersistenceError(msg, operation="insert", cause=e) from e

        self._logger.info(
            "comment_created",
            comment_id=comment.id,
            commit_sha=commit_sha,
            line=comment.line,
            poster_id=author_id,
        )

        mentions = extract_mentions(comment.content)
        self._notify(comment, mentions, repo_link)
        return comment

    def _notify(
        self,
        comment: Comment,
        mentions: tuple[str, ...],
        repo_link: str,
    ) -> None:
        with self._stage("activity", comment):
            self._sink.record_activity(
                ActivityEvent(
                    op_type=ActionType.COMMENT_COMMIT,
                    actor_id=comment.poster_id,
                    repo_id=comment.repo_id,
                    content=f"{comment.commit_sha}|{comment.summary}",
                )
            )

        if not self._config.mail_enabled:
            return

        with self._stage("watchers", comment):
            watchers = self._watchers(comment)
            author = self._author(comment)
            if watchers:
                payload = build_comment_mail(
                    MailKind.WATCH, comment, author, repo_link=repo_link
                )
                self._sink.send_mail(watchers, payload)

        with self._stage("mentions", comment):
            mentioned = self._mentioned(comment, mentions, watchers)
            if mentioned:
                payload = build_comment_mail(
                    MailKind.MENTION, comment, author, repo_link=repo_link
                )
                self._sink.send_mail(mentioned, payload)

        self._logger.info(
            "comment_notified",
            comment_id=comment.id,
            watchers=len(watchers),
            mentioned=len(mentioned),
        )

    @contextmanager
    def _stage(self, stage: str, comment: Comment) -> Iterator[None]:
        try:
            yield
        except Exception as e:  # noqa: BLE001
            self._logger.exception(
                "notification_failed", stage=stage, comment_id=comment.id
            )
            msg = f"Notification stage {stage!r} failed for comment {comment.id}: {e}"
            raise DeliveryError(msg, stage=stage, comment=comment, cause=e) from e

    # =========================================================================
    # Fan-out
    # =========================================================================

    def compute_fanout(self, comment: Comment) -> NotificationFanout:
        """Work out who would be notified about comment.

        Performs the directory lookups only; nothing is sent.
        """
        watchers = self._watchers(comment)
        mentioned = self._mentioned(comment, extract_mentions(comment.content), watchers)
        return NotificationFanout(watchers=watchers, mentioned=mentioned)

    def _author(self, comment: Comment) -> Account | None:
        return self._accounts.get_accounts_by_ids([comment.poster_id]).get(
            comment.poster_id
        )

    def _watchers(self, comment: Comment) -> tuple[Account, ...]:
        return tuple(
            account
            for account in self._accounts.list_watchers(comment.repo_id)
            if account.id != comment.poster_id
        )

    def _mentioned(
        self,
        comment: Comment,
        mentions: tuple[str, ...],
        watchers: tuple[Account, ...],
    ) -> tuple[Account, ...]:
        covered_handles = {account.lower_handle for account in watchers}
        residual = [h for h in mentions if h.lower() not in covered_handles]
        if not residual:
            return ()

        resolved = self._accounts.get_accounts_by_handles(residual)
        excluded_ids = {comment.poster_id} | {account.id for account in watchers}
        recipients: dict[int, Account] = {}
        for handle in residual:
            account = resolved.get(handle.lower())
            if account is not None and account.id not in excluded_ids:
                recipients.setdefault(account.id, account)
        return tuple(recipients.values())

    # =========================================================================
    # Delete
    # =========================================================================

    def delete_commit_comment(
        self,
        comment_id: int,
        requester_id: int,
        *,
        privileged: bool = False,
    ) -> None:
        """Delete a comment posted by requester_id.

        With ``privileged=True`` any comment may be deleted.

        Raises:
            CommentAuthorizationError: If nothing was deleted. The error is
                the same whether the comment is missing or belongs to someone
                else.
            CommentPersistenceError: If the store fails.
        """
        try:
            removed = self._store.delete(
                comment_id, None if privileged else requester_id
            )
        except Exception as e:  # noqa: BLE001
            self._logger.exception("comment_delete_failed", comment_id=comment_id)
            msg = f"Failed to delete comment {comment_id}: {e}"
            raise CommentPersistenceError(msg, operation="delete", cause=e) from e

        if not removed:
            self._logger.info(
                "comment_delete_refused",
                comment_id=comment_id,
                requester_id=requester_id,
            )
            msg = f"Comment {comment_id} cannot be deleted by account {requester_id}"
            raise CommentAuthorizationError(msg)

        self._logger.info(
            "comment_deleted",
            comment_id=comment_id,
            requester_id=requester_id,
            privileged=privileged,
        )
