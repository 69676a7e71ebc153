"""
kvtable.db

Persistence package (SQLAlchemy async over aiosqlite).

Responsibilities:
- Table handle, schema bootstrap, statement templates and value conversion.
- Engine/connection setup.
"""

# Package marker; import from the submodules.
