"""QuillPress.

This package contains the backend of a blog/CMS: the REST API an admin
dashboard and a public blog frontend consume to manage and render content.

High-level architecture
-----------------------

The codebase is organized around three layers:

- **Persistence**: SQLModel entities and async repositories. Every table,
  link table and query lives under ``quillpress.core.database``.
- **Content processing**: pure functions that sanitize HTML, derive excerpts and
  reading times, extract keywords for auto-tagging, score tag similarity and
  render feeds. They live under ``quillpress.core.content`` and never touch the
  database.
- **Services and API**: request-scoped services combine repositories and content
  functions into the CMS operations (auto-tagged post creation, tag merges,
  page versioning, media storage) and FastAPI routers expose them.

Core subpackages
----------------

- ``quillpress.core``: logging, monitoring, domain errors, database layer,
  content processing and the API I/O schemas.
- ``quillpress.server``: the FastAPI application, its configuration, routers,
  services, middleware and exception handlers.
"""

__version__ = "0.1.0"
