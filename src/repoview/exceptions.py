"""repoview exceptions.

Every error carries a detailed message (``str(error)``) meant for logs and a
sanitized ``user_message`` that is safe to show to an end user.
"""

from typing import TYPE_CHECKING, Any, ClassVar

if TYPE_CHECKING:
    from pathlib import Path

    from repoview.comments._models import Comment


class RepoviewError(Exception):
    """Base exception for repoview errors."""

    default_user_message: ClassVar[str] = "Something went wrong."

    @property
    def user_message(self) -> str:
        """Message that can be shown to an end user without leaking details."""
        return self.default_user_message


# =============================================================================
# Not Found
# =============================================================================


class NotFoundError(RepoviewError, KeyError):
    """Raised when a repository object or history does not exist."""

    default_user_message: ClassVar[str] = "Not found."

    def __str__(self) -> str:
        # KeyError quotes its argument; keep plain messages for logs.
        return str(self.args[0]) if self.args else ""


class NoBranchesError(NotFoundError):
    """The repository has no branches, so there is no history to show."""

    default_user_message: ClassVar[str] = "This repository has no branches."


class PathHistoryNotFoundError(NotFoundError):
    """No commit under the given ref ever touched the path.

    Attributes:
        ref: The starting ref of the walk.
        path: The repository-relative path that has no history.
    """

    def __init__(self, message: str, *, ref: str, path: str) -> None:
        """Initialize with error message and lookup context."""
        super().__init__(message)
        self.ref: str = ref
        self.path: str = path

    @property
    def user_message(self) -> str:
        return f"No history for {self.path!r} at {self.ref!r}."


class CommitNotFoundError(NotFoundError):
    """A ref or commit SHA could not be resolved.

    Attributes:
        ref: The ref or SHA that failed to resolve.
    """

    def __init__(self, message: str, *, ref: str) -> None:
        """Initialize with error message and the unresolved ref."""
        super().__init__(message)
        self.ref: str = ref

    @property
    def user_message(self) -> str:
        return f"Commit not found: {self.ref!r}."


class BlobNotFoundError(NotFoundError):
    """A path does not exist as a file at the given commit."""

    def __init__(self, message: str, *, sha: str, path: str) -> None:
        """Initialize with error message and lookup context."""
        super().__init__(message)
        self.sha: str = sha
        self.path: str = path

    @property
    def user_message(self) -> str:
        return f"File not found: {self.path!r}."


# =============================================================================
# Validation
# =============================================================================


class ValidationError(RepoviewError, ValueError):
    """Raised when caller input is rejected before any side effect."""

    default_user_message: ClassVar[str] = "Invalid input."


class CommentValidationError(ValidationError):
    """Raised when comment content or its line anchor is invalid.

    Attributes:
        field: The rejected field ("content" or "line").
        value: The rejected value.
    """

    default_user_message: ClassVar[str] = "Comment content and line are required."

    def __init__(self, message: str, *, field: str, value: str) -> None:
        """Initialize with error message and the rejected field."""
        super().__init__(message)
        self.field: str = field
        self.value: str = value


# =============================================================================
# Upstream
# =============================================================================


class UpstreamError(RepoviewError):
    """A collaborator (repository reader, store) failed unexpectedly.

    Attributes:
        operation: Name of the operation that failed.
        cause: The underlying exception, if any.
    """

    default_user_message: ClassVar[str] = (
        "The repository could not be read. Please try again later."
    )

    def __init__(
        self,
        message: str,
        *,
        operation: str,
        cause: Exception | None = None,
    ) -> None:
        """Initialize with error message and operation context."""
        super().__init__(message)
        self.operation: str = operation
        self.cause: Exception | None = cause

    @property
    def user_message(self) -> str:
        if self.operation == "open":
            return "The repository could not be opened."
        return self.default_user_message


class CommentPersistenceError(UpstreamError):
    """The comment store failed; nothing was persisted or sent."""

    default_user_message: ClassVar[str] = (
        "The comment could not be saved. Please try again later."
    )


# =============================================================================
# Delivery
# =============================================================================


class DeliveryError(RepoviewError):
    """Notification failed after the comment was durably stored.

    Attributes:
        stage: Pipeline stage that failed ("activity", "watchers", "mentions").
        comment: The persisted comment.
        cause: The underlying exception, if any.
    """

    default_user_message: ClassVar[str] = (
        "Comment saved, but notifications may be delayed."
    )

    def __init__(
        self,
        message: str,
        *,
        stage: str,
        comment: "Comment",  # noqa: UP037
        cause: Exception | None = None,
    ) -> None:
        """Initialize with error message and pipeline context."""
        super().__init__(message)
        self.stage: str = stage
        self.comment: "Comment" = comment  # noqa: UP037
        self.cause: Exception | None = cause


# =============================================================================
# Authorization
# =============================================================================


class AuthorizationError(RepoviewError):
    """The requester may not perform the operation."""

    default_user_message: ClassVar[str] = "You cannot perform this action."


class CommentAuthorizationError(AuthorizationError):
    """Delete refused; raised identically for missing and foreign comments."""

    default_user_message: ClassVar[str] = "The comment could not be deleted."


# =============================================================================
# Configuration
# =============================================================================


class ConfigError(RepoviewError):
    """Base exception for configuration errors."""

    default_user_message: ClassVar[str] = "The configuration is invalid."

    @property
    def user_message(self) -> str:
        # Messages name the operator's own file and keys, never upstream state.
        return str(self)


class ConfigLoadError(ConfigError):
    """Raised when configuration cannot be loaded or parsed."""

    def __init__(
        self,
        message: str,
        *,
        path: "Path | None" = None,  # noqa: UP037
        line: int | None = None,
        column: int | None = None,
    ) -> None:
        """Initialize with error message and optional location context."""
        super().__init__(message)
        self.path: "Path | None" = path  # noqa: UP037
        self.line: int | None = line
        self.column: int | None = column


class ConfigValidationError(ConfigError):
    """Raised when configuration fails validation."""

    def __init__(
        self,
        message: str,
        *,
        key: str,
        value: Any,  # pyright: ignore[reportAny,reportExplicitAny]
        expected: str,
        source: str | None = None,
    ) -> None:
        """Initialize with error message and validation context."""
        super().__init__(message)
        self.key: str = key
        self.value: Any = value  # pyright: ignore[reportExplicitAny]
        self.expected: str = expected
        self.source: str | None = source
