"""API routers for the REST API."""

from panels.web.routers.boq import router as boq_router
from panels.web.routers.designs import router as designs_router
from panels.web.routers.feedback import router as feedback_router
from panels.web.routers.importer import router as import_router
from panels.web.routers.layouts import router as layouts_router
from panels.web.routers.placement import router as placement_router
from panels.web.routers.properties import router as properties_router

__all__ = [
    "boq_router",
    "designs_router",
    "feedback_router",
    "import_router",
    "layouts_router",
    "placement_router",
    "properties_router",
]
