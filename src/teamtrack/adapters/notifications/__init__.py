"""Account notification adapters."""

from teamtrack.adapters.notifications.console import ConsoleAccountMailer

__all__ = ["ConsoleAccountMailer"]
