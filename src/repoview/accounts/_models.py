"""Account models."""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Account:
    """A user account known to the hosting service.

    Attributes:
        id: Numeric account identifier.
        handle: Login name used in mentions (without the ``@`` sigil).
        email: Primary email address.
        display_name: Optional full name for display.
    """

    id: int
    handle: str
    email: str
    display_name: str = ""

    @property
    def lower_handle(self) -> str:
        """Handle normalized for case-insensitive comparison."""
        return self.handle.lower()
