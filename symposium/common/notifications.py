"""Notification dispatch.

Callers hand a notifier the recipients and the event; delivery is fire and
forget from their point of view. The default notifier writes to the log, a
deployment can swap in a mail-backed one through ``get_notifier``.
"""

import logging
from typing import Iterable

logger = logging.getLogger(__name__)


class Notifier:
    """Base notifier; subclasses implement ``send``."""

    def send(self, recipients: Iterable[str], subject: str, body: str) -> None:
        raise NotImplementedError

    def issue_reported(self, recipients: Iterable[str], issue) -> None:
        conference = issue.conference
        subject = f"Issue reported: {conference.title}"
        body = (
            f"Conference #{conference.id} ({conference.title}) was reported "
            f"as {issue.reason.value}.\n\n{issue.note}"
        )
        self.send(list(recipients), subject, body)


class LogNotifier(Notifier):
    def send(self, recipients: Iterable[str], subject: str, body: str) -> None:
        recipients = list(recipients)
        if not recipients:
            logger.warning(f"No recipients for notification: {subject}")
            return
        logger.info(f"Notification to {', '.join(recipients)}: {subject}")


_notifier: Notifier = LogNotifier()


def get_notifier() -> Notifier:
    """FastAPI dependency returning the active notifier."""
    return _notifier
