"""Background bulk email for admin broadcasts."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from pathlib import Path

from social_network.services.email import EmailSenderProtocol

logger = logging.getLogger(__name__)


class BroadcastDispatcher:
    """Runs broadcasts as detached tasks and tracks them until they finish.

    Each broadcast sends to its recipients one at a time. A failed recipient is
    logged and skipped. `drain()` blocks until every in-flight broadcast is done
    and is called while the application shuts down.
    """

    def __init__(self, sender: EmailSenderProtocol) -> None:
        self._sender = sender
        self._tasks: set[asyncio.Task[None]] = set()

    @property
    def in_flight(self) -> int:
        return len(self._tasks)

    def dispatch(
        self,
        recipients: Sequence[str],
        subject: str,
        body: str,
        attachment: Path | None = None,
    ) -> asyncio.Task[None]:
        """Start sending in the background and return immediately."""
        logger.info(
            "Starting email broadcast",
            extra={
                "subject": subject,
                "user_count": len(recipients),
                "has_attachment": attachment is not None,
            },
        )
        task = asyncio.create_task(self._run(list(recipients), subject, body, attachment))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def drain(self) -> None:
        """Wait for all in-flight broadcasts to complete."""
        if not self._tasks:
            return
        logger.info("Waiting for background tasks to complete", extra={"count": len(self._tasks)})
        await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def _run(
        self,
        recipients: list[str],
        subject: str,
        body: str,
        attachment: Path | None,
    ) -> None:
        sent = 0
        try:
            for email in recipients:
                try:
                    ok = await self._sender.send(email, subject, body, attachment)
                except Exception:
                    logger.exception("Failed to send broadcast email", extra={"email": email})
                    continue
                if not ok:
                    logger.error("Failed to send broadcast email", extra={"email": email})
                    continue
                sent += 1
                logger.info("Broadcast email sent successfully", extra={"email": email})
        finally:
            if attachment is not None:
                attachment.unlink(missing_ok=True)
        logger.info(
            "Email broadcast completed",
            extra={"sent": sent, "failed": len(recipients) - sent},
        )
