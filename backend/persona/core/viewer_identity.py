"""Viewer Identity — boundary policy turning a request principal into a ViewerId.

Invariants:
    - A present principal must be non-blank, <= 128 chars, printable, and not
      use the reserved anonymous prefix
    - An absent principal either yields a synthetic `anon:` identity or is
      rejected, per AnonymousViewerPolicy
    - Synthetic identities are never reused: each anonymous load is a new viewer

Design Decisions:
    - Token factory injected: keeps this module pure and tests deterministic
"""

from collections.abc import Callable
from uuid import uuid4

from persona.core.domain_types import (
    ANONYMOUS_PREFIX, AnonymousViewerPolicy, ViewerId,
)
from persona.core.errors import InvalidIdentityError

MAX_VIEWER_ID_LENGTH = 128


def _random_token() -> str:
    return uuid4().hex


def validate_viewer_id(viewer_id: str) -> ViewerId:
    """Reject identities that would make the distinct-viewer count meaningless."""
    if not viewer_id or not viewer_id.strip():
        raise InvalidIdentityError("Viewer identity must not be empty")
    if viewer_id != viewer_id.strip():
        raise InvalidIdentityError(
            "Viewer identity must not have surrounding whitespace",
        )
    if len(viewer_id) > MAX_VIEWER_ID_LENGTH:
        raise InvalidIdentityError(
            f"Viewer identity exceeds {MAX_VIEWER_ID_LENGTH} characters",
        )
    if not viewer_id.isprintable():
        raise InvalidIdentityError(
            "Viewer identity contains control characters",
        )
    return ViewerId(viewer_id)


def resolve_viewer_id(
    principal: str | None,
    policy: AnonymousViewerPolicy,
    token_factory: Callable[[], str] = _random_token,
) -> ViewerId:
    """Resolve the identity an interaction is recorded under."""
    if principal is None:
        if policy is AnonymousViewerPolicy.REJECT:
            raise InvalidIdentityError("Anonymous viewers are not permitted")
        return ViewerId(f"{ANONYMOUS_PREFIX}{token_factory()}")

    viewer_id = validate_viewer_id(principal)
    if viewer_id.startswith(ANONYMOUS_PREFIX):
        raise InvalidIdentityError(
            f"Viewer identity prefix '{ANONYMOUS_PREFIX}' is reserved",
        )
    return viewer_id
