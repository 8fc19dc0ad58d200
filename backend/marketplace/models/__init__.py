"""ORM Models — SQLAlchemy declarative models for all domain entities.

Invariants:
    - All models inherit from Base (db/base.py)
    - Listing snapshots its seller; it holds no foreign key to User

Design Decisions:
    - One file per entity for locality
    - All models imported here so SQLAlchemy resolves string-based relationship()
      references before any query runs
"""

from marketplace.models.listing import Listing  # noqa: F401
from marketplace.models.user import User  # noqa: F401
from marketplace.models.access_token import AccessToken  # noqa: F401
