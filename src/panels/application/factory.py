"""Service factory for dependency injection."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from panels.application.config.schema import AppSettings
from panels.domain.services.revisions import RevisionAllocator

if TYPE_CHECKING:
    from panels.application.importer import BulkImporter
    from panels.application.services import (
        BoqService,
        DesignService,
        FeedbackService,
        LayoutService,
        PropertyService,
    )
    from panels.contracts.protocols import StoreClient

logger = logging.getLogger(__name__)


@dataclass
class ServiceFactory:
    """Factory for creating service instances.

    Centralizes service instantiation to support:
    - Dependency injection for testing (pass ``store``)
    - Settings-based store selection (hosted REST store or in-memory)
    - Lazy initialization and caching of services

    All services built by one factory share the same store and the same
    RevisionAllocator, so concurrent saves and imports in one process
    serialise on revision allocation.

    Example:
        ```python
        factory = ServiceFactory(settings=load_settings())
        result = await factory.get_design_service().get_designs("a@b.com")
        ```
    """

    settings: AppSettings = field(default_factory=AppSettings)
    store: "StoreClient | None" = None

    allocator: RevisionAllocator = field(default_factory=RevisionAllocator, init=False)

    # Cached instances
    _property_service: "PropertyService | None" = field(
        default=None, init=False, repr=False
    )
    _design_service: "DesignService | None" = field(
        default=None, init=False, repr=False
    )
    _layout_service: "LayoutService | None" = field(
        default=None, init=False, repr=False
    )
    _feedback_service: "FeedbackService | None" = field(
        default=None, init=False, repr=False
    )
    _boq_service: "BoqService | None" = field(default=None, init=False, repr=False)

    def get_store(self) -> "StoreClient":
        """Get or create the store client selected by the settings."""
        if self.store is None:
            if self.settings.uses_memory_store:
                from panels.infrastructure.store import InMemoryStore

                logger.info("No store URL configured, using in-memory store")
                self.store = InMemoryStore()
            else:
                from panels.infrastructure.store import RestStoreClient

                assert self.settings.store_url is not None
                self.store = RestStoreClient(
                    self.settings.store_url,
                    self.settings.store_api_key,
                    timeout=self.settings.request_timeout,
                )
        return self.store

    def get_property_service(self) -> "PropertyService":
        """Get or create property service instance."""
        if self._property_service is None:
            from panels.application.services import PropertyService

            self._property_service = PropertyService(self.get_store())
        return self._property_service

    def get_design_service(self) -> "DesignService":
        """Get or create design service instance."""
        if self._design_service is None:
            from panels.application.services import DesignService

            self._design_service = DesignService(
                self.get_store(),
                self.settings,
                self.get_property_service(),
                allocator=self.allocator,
            )
        return self._design_service

    def get_layout_service(self) -> "LayoutService":
        """Get or create layout service instance."""
        if self._layout_service is None:
            from panels.application.services import LayoutService

            self._layout_service = LayoutService(self.get_store())
        return self._layout_service

    def get_feedback_service(self) -> "FeedbackService":
        """Get or create feedback service instance."""
        if self._feedback_service is None:
            from panels.application.services import FeedbackService

            self._feedback_service = FeedbackService(self.get_store(), self.settings)
        return self._feedback_service

    def get_boq_service(self) -> "BoqService":
        """Get or create BOQ service instance."""
        if self._boq_service is None:
            from panels.application.services import BoqService

            self._boq_service = BoqService(self.get_store())
        return self._boq_service

    def create_importer(self, dry_run: bool = False) -> "BulkImporter":
        """Create a bulk importer.

        Args:
            dry_run: Run against a fresh in-memory store instead of the
                configured one, so nothing is written.
        """
        from panels.application.importer import BulkImporter

        if dry_run:
            from panels.infrastructure.store import InMemoryStore

            return BulkImporter(InMemoryStore(), self.settings)
        return BulkImporter(self.get_store(), self.settings, allocator=self.allocator)


# Global default factory instance
_default_factory: ServiceFactory | None = None


def get_factory() -> ServiceFactory:
    """Get the default service factory, loading settings on first use."""
    global _default_factory
    if _default_factory is None:
        from panels.application.config import load_settings

        _default_factory = ServiceFactory(settings=load_settings())
    return _default_factory


def set_factory(factory: ServiceFactory | None) -> None:
    """Set a custom factory (for testing)."""
    global _default_factory
    _default_factory = factory


def reset_factory() -> None:
    """Reset the factory to default (for testing cleanup)."""
    global _default_factory
    _default_factory = None
