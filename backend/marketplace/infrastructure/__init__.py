"""Infrastructure Layer — database sessions, image files, credentials and logging.

Invariants:
    - Infrastructure imports only core/errors.py from core/ (for StorageError mapping)
    - Every DB and filesystem failure surfaces as StorageError

Design Decisions:
    - Thin wrappers over SQLAlchemy, aiofiles and hashlib; no business rules here
"""
