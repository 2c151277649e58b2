"""
mapcrud - metadata-driven CRUD scaffolding.

Describe the fields of a resource once, in a mapping table, and get:
- Input validation (Field Rule Registry + Input-Decoration Applier)
- API documentation metadata (Input/Response-Decoration Appliers)
- Shallow-copy construction of entities and response shapes
- Generic create/read/update/delete orchestration over any backing store
"""

from mapcrud._version import get_version as _get_version

__version__ = _get_version()

__all__ = ["__version__"]
