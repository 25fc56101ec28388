"""Store-backed application services."""

from .base import StoreService, utc_now
from .boq import BoqService
from .designs import DesignFilters, DesignService, validate_design_data
from .feedback import MAX_SCREENSHOTS, FeedbackService
from .layouts import LayoutService, attach_floor_plan
from .properties import PropertyService

__all__ = [
    "BoqService",
    "DesignFilters",
    "DesignService",
    "FeedbackService",
    "LayoutService",
    "MAX_SCREENSHOTS",
    "PropertyService",
    "StoreService",
    "attach_floor_plan",
    "utc_now",
    "validate_design_data",
]
