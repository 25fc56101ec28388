"""Explicit per-request session state."""

from __future__ import annotations

from dataclasses import dataclass, field, replace


@dataclass(frozen=True)
class SessionState:
    """Who is acting and which project they are working in.

    Built by the caller (request headers in the web app, options in the
    CLI) and passed into the services.

    Attributes:
        user_email: Identity of the acting user, lower-cased.
        project_code: Property code (``prop_id``) of the current project.
        project_name: Display name of the current project.
        is_edit_mode: True when an existing design is being edited.
        editing_design_id: Id of the design being edited.
        boq_project_ids: Projects included in the BOQ view.
    """

    user_email: str
    project_code: str | None = None
    project_name: str | None = None
    is_edit_mode: bool = False
    editing_design_id: str | None = None
    boq_project_ids: tuple[str, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        object.__setattr__(self, "user_email", self.user_email.strip().lower())
        if self.is_edit_mode and not self.editing_design_id:
            raise ValueError("Edit mode requires editing_design_id")

    @property
    def is_anonymous(self) -> bool:
        return not self.user_email

    def editing(self, design_id: str) -> SessionState:
        """Return a copy of the session in edit mode for a design."""
        return replace(self, is_edit_mode=True, editing_design_id=design_id)

    def with_project(self, code: str | None, name: str | None) -> SessionState:
        return replace(self, project_code=code, project_name=name)
