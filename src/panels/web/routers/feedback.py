"""Feedback inbox endpoints."""

from typing import Any

from fastapi import APIRouter, Query

from panels.domain.value_objects import FeedbackStatus
from panels.web.dependencies import FeedbackServiceDep, SessionDep
from panels.web.exceptions import unwrap
from panels.web.schemas.requests import FeedbackRequest, FeedbackStatusRequest

router = APIRouter(prefix="/feedback", tags=["feedback"])


@router.post("", status_code=201)
async def submit_feedback(
    request: FeedbackRequest, session: SessionDep, service: FeedbackServiceDep
) -> dict[str, Any]:
    result = await service.submit_feedback(
        session,
        request.message,
        request.screenshots,
        url=request.url,
        user_agent=request.user_agent,
    )
    return unwrap(result)


@router.get("")
async def list_feedback(
    session: SessionDep,
    service: FeedbackServiceDep,
    status: FeedbackStatus | None = None,
    limit: int | None = Query(default=None, ge=1),
) -> dict[str, Any]:
    """Admin inbox, newest first."""
    return unwrap(await service.list_feedback(session, status, limit))


@router.patch("/{feedback_id}")
async def update_feedback_status(
    feedback_id: str,
    request: FeedbackStatusRequest,
    session: SessionDep,
    service: FeedbackServiceDep,
) -> dict[str, Any]:
    return unwrap(await service.update_status(session, feedback_id, request.status))


@router.delete("/{feedback_id}")
async def delete_feedback(
    feedback_id: str, session: SessionDep, service: FeedbackServiceDep
) -> dict[str, Any]:
    return unwrap(await service.delete_feedback(session, feedback_id))
