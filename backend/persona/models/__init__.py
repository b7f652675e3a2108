"""ORM Models — SQLAlchemy declarative models for profile documents and viewer records.

Invariants:
    - All models inherit from Base (db/base.py)
    - Profile is the aggregate root; viewer records are scoped by profile_key

Design Decisions:
    - One file per entity for locality
    - All models imported here so SQLAlchemy resolves string-based relationship()
      references before any query runs
"""

from persona.models.profile import Profile  # noqa: F401
from persona.models.profile_viewer import ProfileViewer  # noqa: F401
