"""Feedback inbox: users submit, admins triage."""

from __future__ import annotations

import logging

from panels.application.config.schema import AppSettings
from panels.application.results import OperationResult
from panels.application.services.base import StoreService, utc_now
from panels.application.session import SessionState
from panels.contracts.protocols import StoreClient, StoreError
from panels.domain.value_objects import FeedbackStatus

logger = logging.getLogger(__name__)

MAX_SCREENSHOTS = 5


class FeedbackService(StoreService):
    """CRUD over the ``feedback`` collection with an admin gate on reads."""

    def __init__(self, store: StoreClient, settings: AppSettings) -> None:
        super().__init__(store)
        self.settings = settings

    def _require_admin(self, session: SessionState) -> OperationResult | None:
        if not self.settings.is_admin_email(session.user_email):
            return OperationResult.fail("forbidden", "Admin access required")
        return None

    async def submit_feedback(
        self,
        session: SessionState,
        message: str,
        screenshots: list[str] | None = None,
        *,
        url: str = "",
        user_agent: str = "",
    ) -> OperationResult:
        """Record a feedback entry with status ``new``.

        Args:
            session: Submitting user; anonymous submissions are allowed.
            message: Feedback text, required.
            screenshots: Image data URLs, at most five.
            url: Page the user was on.
            user_agent: Client identification.
        """
        message = message.strip()
        if not message:
            return OperationResult.fail("invalid", "Feedback message is required")
        screenshots = list(screenshots or [])
        if len(screenshots) > MAX_SCREENSHOTS:
            return OperationResult.fail(
                "invalid", f"At most {MAX_SCREENSHOTS} screenshots can be attached"
            )
        row = {
            "message": message,
            "user_email": session.user_email or None,
            "screenshots": screenshots,
            "timestamp": utc_now(),
            "user_agent": user_agent,
            "url": url,
            "status": FeedbackStatus.NEW.value,
        }
        try:
            inserted = await self.store.insert("feedback", [row])
        except StoreError as e:
            return self.store_failed("Failed to submit feedback", e)
        logger.info(f"Feedback received from {session.user_email or 'anonymous'}")
        return OperationResult.ok(
            "Thank you for your feedback!", feedback_id=inserted[0]["id"]
        )

    async def list_feedback(
        self,
        session: SessionState,
        status: FeedbackStatus | None = None,
        limit: int | None = None,
    ) -> OperationResult:
        """Newest entries first; admins only."""
        denied = self._require_admin(session)
        if denied is not None:
            return denied
        filters = {"status": status.value} if status is not None else None
        try:
            rows = await self.store.select(
                "feedback", filters, order_by="timestamp", ascending=False, limit=limit
            )
        except StoreError as e:
            return self.store_failed("Failed to load feedback", e)
        new_count = sum(1 for r in rows if r.get("status") == FeedbackStatus.NEW.value)
        return OperationResult.ok("Feedback loaded", feedback=rows, new_count=new_count)

    async def update_status(
        self, session: SessionState, feedback_id: str, status: FeedbackStatus
    ) -> OperationResult:
        denied = self._require_admin(session)
        if denied is not None:
            return denied
        try:
            updated = await self.store.update(
                "feedback", {"status": status.value}, {"id": feedback_id}
            )
        except StoreError as e:
            return self.store_failed("Failed to update feedback status", e)
        if not updated:
            return OperationResult.fail("not_found", "Feedback not found")
        return OperationResult.ok(f"Feedback marked {status.value}", feedback=updated[0])

    async def delete_feedback(self, session: SessionState, feedback_id: str) -> OperationResult:
        denied = self._require_admin(session)
        if denied is not None:
            return denied
        try:
            removed = await self.store.delete("feedback", {"id": feedback_id})
        except StoreError as e:
            return self.store_failed("Failed to delete feedback", e)
        if not removed:
            return OperationResult.fail("not_found", "Feedback not found")
        return OperationResult.ok("Feedback deleted")
