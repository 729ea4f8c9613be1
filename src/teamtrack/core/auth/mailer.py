"""Account mail protocol.

Delivery and templating live outside the core. The auth service only
hands a user and a freshly issued token to whichever mailer is wired in:
- SMTP/API mailers in production
- ConsoleAccountMailer for local development
- mocks in tests
"""

from typing import Protocol, runtime_checkable

from teamtrack.core.auth.types import User


@runtime_checkable
class AccountMailer(Protocol):
    """Sends account lifecycle emails."""

    async def send_verification_email(self, user: User, token: str) -> None:
        """Send the email-verification link.

        Args:
            user: The user whose address needs verifying.
            token: A token issued for the ``verify`` purpose.
        """
        ...

    async def send_password_reset_email(self, user: User, token: str) -> None:
        """Send the password-reset link.

        Args:
            user: The user who asked for a reset.
            token: A token issued for the ``reset`` purpose.
        """
        ...
