"""Initial schema — profiles and per-viewer witness records.

Revision ID: 001_initial
Revises: None
Create Date: 2026-10-19

profiles.row_version is the optimistic-concurrency token used by the ORM
(version_id_col); profile_viewers has a composite primary key so a racing
duplicate first-visit insert fails instead of double counting.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "profiles",
        sa.Column("key", sa.String(64), nullable=False),
        sa.Column("owner_id", sa.String(128), nullable=True),
        sa.Column("payload", sa.JSON, nullable=False),
        sa.Column("total_interactions", sa.Integer, nullable=False, server_default="0"),
        sa.Column("unique_viewers", sa.Integer, nullable=False, server_default="0"),
        sa.Column("row_version", sa.Integer, nullable=False, server_default="1"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("last_updated", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.CheckConstraint("total_interactions >= 0", name="ck_profiles_total_nonnegative"),
        sa.CheckConstraint("unique_viewers >= 0", name="ck_profiles_unique_nonnegative"),
        sa.PrimaryKeyConstraint("key", name="pk_profiles"),
    )
    op.create_index("ix_profiles_owner_id", "profiles", ["owner_id"])

    op.create_table(
        "profile_viewers",
        sa.Column("profile_key", sa.String(64), nullable=False),
        sa.Column("viewer_id", sa.String(128), nullable=False),
        sa.Column("first_seen_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.PrimaryKeyConstraint("profile_key", "viewer_id", name="pk_profile_viewers"),
        sa.ForeignKeyConstraint(
            ["profile_key"], ["profiles.key"],
            name="fk_profile_viewers_profile_key_profiles", ondelete="CASCADE",
        ),
    )


def downgrade() -> None:
    op.drop_table("profile_viewers")
    op.drop_index("ix_profiles_owner_id", table_name="profiles")
    op.drop_table("profiles")
