"""Build notification mails for commit comments."""

from typing import TYPE_CHECKING

from repoview.enums import MailKind
from repoview.notifications._models import MailPayload
from repoview.repository import SHORT_SHA_LENGTH
from repoview.utils import render_template

if TYPE_CHECKING:
    from repoview.accounts import Account
    from repoview.comments import Comment


def _author_label(author: "Account | None", comment: "Comment") -> str:  # noqa: UP037
    if author is None:
        return f"User {comment.poster_id}"
    return author.display_name or author.handle


def build_comment_mail(
    kind: MailKind,
    comment: "Comment",  # noqa: UP037
    author: "Account | None",  # noqa: UP037
    *,
    repo_link: str = "",
) -> MailPayload:
    """Build the watcher or mention mail for a stored comment.

    Args:
        kind: Which notification to build.
        comment: The persisted comment.
        author: The comment author's account, if known.
        repo_link: Base URL of the repository, used for the comment link.

    Returns:
        The mail payload; recipients are chosen by the caller.
    """
    short_sha = comment.commit_sha[:SHORT_SHA_LENGTH]
    label = _author_label(author, comment)
    link = comment.link(repo_link)

    if kind is MailKind.MENTION:
        subject = f"{label} mentioned you on commit {short_sha}"
        template = "mail/mention.txt"
    else:
        subject = f"{label} commented on commit {short_sha}"
        template = "mail/watch.txt"

    body = render_template(
        template,
        author=label,
        short_sha=short_sha,
        line=comment.line,
        content=comment.content,
        link=link,
    )
    return MailPayload(kind=kind, subject=subject, body=body, link=link)
