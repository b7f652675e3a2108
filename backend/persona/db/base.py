"""Declarative Base — metadata shared by the profile tables and alembic.

Invariants:
    - Every model inherits from Base, so Base.metadata lists every table
      that create_all_tables() and autogenerate know about
    - Constraint names follow NAMING_CONVENTION, matching the names written
      out in alembic/versions
"""

from sqlalchemy import MetaData
from sqlalchemy.orm import DeclarativeBase

NAMING_CONVENTION = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}


class Base(DeclarativeBase):
    metadata = MetaData(naming_convention=NAMING_CONVENTION)
