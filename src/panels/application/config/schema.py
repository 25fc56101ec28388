"""Pydantic model for application settings."""

from __future__ import annotations

import re

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_ADMIN_EMAIL = "admin@panels.local"


def split_emails(raw: str) -> list[str]:
    """Split a comma, semicolon, or whitespace separated email list."""
    return [part.strip().lower() for part in re.split(r"[,;\s]+", raw) if part.strip()]


class AppSettings(BaseModel):
    """Runtime settings shared by the web app and the CLI.

    Attributes:
        store_url: Base URL of the hosted store. When unset, an in-memory
            store is used instead.
        store_api_key: API key sent as ``apikey`` and bearer token.
        admin_emails: Emails allowed into the admin screens, in addition
            to ``default_admin_email``.
        default_admin_email: Admin that is always granted access.
        request_timeout: Store request timeout in seconds.
        default_owner_email: Owner recorded on imported projects and
            designs when the import document names none.
    """

    model_config = ConfigDict(extra="forbid")

    store_url: str | None = Field(default=None, description="Hosted store base URL")
    store_api_key: str = Field(default="", description="Hosted store API key")
    admin_emails: list[str] = Field(default_factory=list)
    default_admin_email: str = Field(default=DEFAULT_ADMIN_EMAIL)
    request_timeout: float = Field(default=10.0, gt=0, le=300)
    default_owner_email: str = Field(default="import@panels.local")

    @field_validator("admin_emails", mode="before")
    @classmethod
    def _parse_admin_emails(cls, value: object) -> object:
        if isinstance(value, str):
            return split_emails(value)
        if isinstance(value, list):
            return [str(v).strip().lower() for v in value if str(v).strip()]
        return value

    @field_validator("default_admin_email")
    @classmethod
    def _normalise_default_admin(cls, value: str) -> str:
        return value.strip().lower()

    @property
    def uses_memory_store(self) -> bool:
        return not self.store_url

    def all_admin_emails(self) -> list[str]:
        """Configured admins plus the default admin, without duplicates."""
        emails = list(self.admin_emails)
        if self.default_admin_email and self.default_admin_email not in emails:
            emails.append(self.default_admin_email)
        return emails

    def is_admin_email(self, email: str | None) -> bool:
        if not email:
            return False
        return email.strip().lower() in self.all_admin_emails()
