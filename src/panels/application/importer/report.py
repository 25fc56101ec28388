"""Outcome of a bulk import run."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any


@dataclass
class ImportReport:
    """Counters and per-record errors of one import.

    ``success`` stays true when individual records fail; it is false only
    when the run as a whole could not proceed.
    """

    success: bool = True
    message: str = ""
    properties_created: int = 0
    user_groups_created: int = 0
    users_created: int = 0
    projects_created: int = 0
    designs_created: int = 0
    configurations_created: int = 0
    errors: list[str] = field(default_factory=list)
    project_ids: list[str] = field(default_factory=list)

    def summary(self) -> str:
        return (
            f"Created {self.properties_created} properties, "
            f"{self.user_groups_created} user groups, {self.users_created} users, "
            f"{self.projects_created} projects, {self.designs_created} designs, "
            f"{self.configurations_created} configurations"
        )

    def finish(self) -> ImportReport:
        """Fill in the message from the counters and errors."""
        if self.errors:
            self.message = (
                f"Import completed with {len(self.errors)} error(s). {self.summary()}"
            )
        else:
            self.message = f"Import completed! {self.summary()}"
        return self

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)
