"""Profile ORM — one row per persona profile document.

Invariants:
    - key is the opaque primary key chosen at creation (uuid4 hex by default)
    - total_interactions / unique_viewers start at 0 and never decrease
    - created_at is immutable; last_updated moves on every interaction
    - row_version increments on every UPDATE (optimistic concurrency token)

Design Decisions:
    - version_id_col over SELECT ... FOR UPDATE: the UPDATE carries
      `WHERE row_version = :read_version`, so a concurrent writer turns into
      StaleDataError instead of a lost update, on PostgreSQL and SQLite alike
    - JSON column for payload: descriptive fields are opaque to the service
    - passive_deletes on viewers: the FK cascade is the database's job
"""

from datetime import datetime, timezone

from sqlalchemy import String, Integer, DateTime, JSON, CheckConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from persona.db.base import Base


class Profile(Base):
    """Profile document — payload plus interaction counters."""
    __tablename__ = "profiles"

    key: Mapped[str] = mapped_column(String(64), primary_key=True)
    owner_id: Mapped[str | None] = mapped_column(
        String(128), nullable=True, index=True,
    )
    payload: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
    total_interactions: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0,
    )
    unique_viewers: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0,
    )
    row_version: Mapped[int] = mapped_column(Integer, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    last_updated: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    __table_args__ = (
        CheckConstraint("total_interactions >= 0", name="ck_profiles_total_nonnegative"),
        CheckConstraint("unique_viewers >= 0", name="ck_profiles_unique_nonnegative"),
    )
    __mapper_args__ = {"version_id_col": row_version}

    # Relationships
    viewers: Mapped[list["ProfileViewer"]] = relationship(
        "ProfileViewer", back_populates="profile",
        passive_deletes=True, lazy="noload",
    )
