"""Infrastructure Layer — database access, persistence adapters, and cross-cutting concerns.

Invariants:
    - Infrastructure implements core protocols; core never imports from here
    - All SQLAlchemy failures mapped to typed errors (core/errors.py)

Design Decisions:
    - Store adapters wrap the session manager instead of owning engines
"""
