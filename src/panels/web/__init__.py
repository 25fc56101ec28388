"""FastAPI REST API for the panel configurator.

This module exposes designs, layouts, properties, BOQ allocation,
feedback and the bulk importer over HTTP.

Usage:
    uvicorn panels.web:app --reload
"""

from panels.web.app import app, create_app

__all__ = ["app", "create_app"]
