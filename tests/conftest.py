"""Pytest configuration and shared fixtures for panel tests."""

from __future__ import annotations

from collections.abc import Iterator

import pytest

from panels.application.config import AppSettings
from panels.application.factory import ServiceFactory, reset_factory, set_factory
from panels.application.session import SessionState
from panels.infrastructure.store import InMemoryStore

ADMIN_EMAIL = "boss@example.com"
OWNER_EMAIL = "alice@example.com"
MEMBER_EMAIL = "bob@example.com"
OUTSIDER_EMAIL = "eve@example.com"
PROP_ID = "HTL001"


# =============================================================================
# pytest-httpx fixture integration
# =============================================================================

# pytest-httpx provides the httpx_mock fixture automatically once installed


def pytest_configure(config: pytest.Config) -> None:
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers", "integration: tests exercising several layers together"
    )
    config.addinivalue_line("markers", "slow: tests that take a long time to run")


# =============================================================================
# Shared fixtures
# =============================================================================


def seeded_tables() -> dict[str, list[dict]]:
    """One property, one user group with access, two members and an outsider."""
    return {
        "property": [
            {
                "prop_id": PROP_ID,
                "property_name": "Harbour Hotel",
                "region": "North",
                "is_active": True,
            }
        ],
        "ug": [{"id": "UG1", "ug": "UG1", "prop_id": PROP_ID, "is_active": True}],
        "ug_property_access": [{"ug_id": "UG1", "prop_id": PROP_ID, "is_active": True}],
        "users": [
            {"email": OWNER_EMAIL, "ug_id": "UG1"},
            {"email": MEMBER_EMAIL, "ug_id": "UG1"},
            {"email": OUTSIDER_EMAIL, "ug_id": None},
        ],
    }


@pytest.fixture
def settings() -> AppSettings:
    return AppSettings(admin_emails=[ADMIN_EMAIL])


@pytest.fixture
def store() -> InMemoryStore:
    """An in-memory store seeded with a small property hierarchy."""
    return InMemoryStore(seeded_tables())


@pytest.fixture
def empty_store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
def factory(settings: AppSettings, store: InMemoryStore) -> ServiceFactory:
    return ServiceFactory(settings=settings, store=store)


@pytest.fixture(autouse=True)
def _reset_default_factory() -> Iterator[None]:
    """Keep the process-wide factory from leaking between tests."""
    reset_factory()
    yield
    reset_factory()


@pytest.fixture
def installed_factory(factory: ServiceFactory) -> ServiceFactory:
    """Install the test factory as the process-wide default."""
    set_factory(factory)
    return factory


@pytest.fixture
def owner_session() -> SessionState:
    return SessionState(
        user_email=OWNER_EMAIL, project_code=PROP_ID, project_name="Lobby Panels"
    )


@pytest.fixture
def member_session() -> SessionState:
    return SessionState(user_email=MEMBER_EMAIL, project_code=PROP_ID)


@pytest.fixture
def outsider_session() -> SessionState:
    return SessionState(user_email=OUTSIDER_EMAIL)


@pytest.fixture
def admin_session() -> SessionState:
    return SessionState(user_email=ADMIN_EMAIL)
