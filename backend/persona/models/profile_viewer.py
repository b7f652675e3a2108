"""ProfileViewer ORM — durable witness that a viewer was counted against a profile.

Invariants:
    - Composite primary key (profile_key, viewer_id): at most one row per pair
    - Inserted once, never updated
    - Row count per profile_key equals profiles.unique_viewers at quiescence

Design Decisions:
    - Composite PK instead of surrogate id + unique index: a racing duplicate
      insert fails with IntegrityError, which the store maps to a conflict
    - Stored outside the profile row: the profile document stays small and
      viewer lookups are point reads
"""

from datetime import datetime, timezone

from sqlalchemy import String, DateTime, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship

from persona.db.base import Base


class ProfileViewer(Base):
    """Viewer record — one per (profile, viewer identity)."""
    __tablename__ = "profile_viewers"

    profile_key: Mapped[str] = mapped_column(
        String(64),
        ForeignKey("profiles.key", ondelete="CASCADE"),
        primary_key=True,
    )
    viewer_id: Mapped[str] = mapped_column(String(128), primary_key=True)
    first_seen_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    # Relationships
    profile: Mapped["Profile"] = relationship(
        "Profile", back_populates="viewers",
    )
