"""FastAPI dependency injection for panel services."""

from typing import Annotated

from fastapi import Depends, Header

from panels.application.factory import ServiceFactory, get_factory
from panels.application.services import (
    BoqService,
    DesignService,
    FeedbackService,
    LayoutService,
    PropertyService,
)
from panels.application.session import SessionState


def get_service_factory() -> ServiceFactory:
    """Get the process-wide ServiceFactory instance."""
    return get_factory()


def get_session(
    x_user_email: Annotated[str, Header()] = "",
    x_project_code: Annotated[str | None, Header()] = None,
    x_project_name: Annotated[str | None, Header()] = None,
    x_editing_design_id: Annotated[str | None, Header()] = None,
) -> SessionState:
    """Build the session from request headers."""
    return SessionState(
        user_email=x_user_email,
        project_code=x_project_code,
        project_name=x_project_name,
        is_edit_mode=bool(x_editing_design_id),
        editing_design_id=x_editing_design_id,
    )


def get_design_service(
    factory: Annotated[ServiceFactory, Depends(get_service_factory)],
) -> DesignService:
    return factory.get_design_service()


def get_layout_service(
    factory: Annotated[ServiceFactory, Depends(get_service_factory)],
) -> LayoutService:
    return factory.get_layout_service()


def get_property_service(
    factory: Annotated[ServiceFactory, Depends(get_service_factory)],
) -> PropertyService:
    return factory.get_property_service()


def get_feedback_service(
    factory: Annotated[ServiceFactory, Depends(get_service_factory)],
) -> FeedbackService:
    return factory.get_feedback_service()


def get_boq_service(
    factory: Annotated[ServiceFactory, Depends(get_service_factory)],
) -> BoqService:
    return factory.get_boq_service()


# Type aliases for cleaner endpoint signatures
ServiceFactoryDep = Annotated[ServiceFactory, Depends(get_service_factory)]
SessionDep = Annotated[SessionState, Depends(get_session)]
DesignServiceDep = Annotated[DesignService, Depends(get_design_service)]
LayoutServiceDep = Annotated[LayoutService, Depends(get_layout_service)]
PropertyServiceDep = Annotated[PropertyService, Depends(get_property_service)]
FeedbackServiceDep = Annotated[FeedbackService, Depends(get_feedback_service)]
BoqServiceDep = Annotated[BoqService, Depends(get_boq_service)]
