"""FastAPI HTTP layer package.

Public re-export so callers can write::

    from catalog.api import app

    uvicorn catalog.api:app --reload
"""

from catalog.api.app import app

__all__ = ["app"]
