"""
Catalog package for the musician directory API.

This package holds the in-memory catalogue store, its response schemas
and the REST routes that expose it. Clients can browse and filter the
registered musicians, register or edit a profile, mark favourites and
switch the display theme. The store is independent of FastAPI and can
be driven directly; the router only translates requests into store
commands.
"""

from .router import router as catalog_router  # noqa: F401
