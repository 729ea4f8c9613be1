"""Console-based account mailer for demo/dev mode.

Prints verification and reset links to stdout so developers can click
them directly.
"""

from urllib.parse import urlencode

from teamtrack.core.auth.mailer import AccountMailer
from teamtrack.core.auth.types import User


class ConsoleAccountMailer:
    """Console-based account mail for demo/dev mode.

    Instead of sending an email, prints the link to the console. This is
    useful for local development without SMTP setup and for exercising
    the verification and password reset flows by hand.
    """

    def __init__(self, frontend_url: str) -> None:
        """Initialize the console mailer.

        Args:
            frontend_url: Base URL of the frontend for building links.
        """
        self._frontend_url = frontend_url.rstrip("/")

    def verification_url(self, token: str) -> str:
        """Build the email verification link for a token."""
        return f"{self._frontend_url}/verify-email?{urlencode({'token': token})}"

    def reset_url(self, token: str) -> str:
        """Build the password reset link for a token."""
        return f"{self._frontend_url}/reset-password?{urlencode({'token': token})}"

    async def send_verification_email(self, user: User, token: str) -> None:
        """Print the email verification link to the console."""
        self._print("[VERIFY EMAIL] Verification link generated", user, self.verification_url(token))

    async def send_password_reset_email(self, user: User, token: str) -> None:
        """Print the password reset link to the console."""
        self._print("[PASSWORD RESET] Reset link generated", user, self.reset_url(token))

    @staticmethod
    def _print(title: str, user: User, url: str) -> None:
        print("\n" + "=" * 70, flush=True)
        print(f"{title} for demo/dev mode", flush=True)
        print(f"  Email: {user.email}", flush=True)
        print(f"  Link:  {url}", flush=True)
        print("=" * 70 + "\n", flush=True)


# Verify we implement the protocol
_mailer: AccountMailer = ConsoleAccountMailer(frontend_url="")
