"""API Dependencies — FastAPI providers for the profile service and viewer identity.

Invariants:
    - The principal comes from the `viewer_header` request header, set by the
      upstream auth gateway (token verification happens before this service)
    - get_viewer_id applies the configured AnonymousViewerPolicy
    - require_principal never accepts anonymous callers

Design Decisions:
    - Service read from app.state: one process-wide instance built in the
      lifespan; tests swap it without touching module globals
"""

from collections.abc import Callable

from fastapi import Depends, Request

from persona.config import Settings, get_settings
from persona.core.domain_types import AnonymousViewerPolicy, ViewerId
from persona.core.errors import PrincipalRequiredError
from persona.core.viewer_identity import resolve_viewer_id
from persona.services.profile_service import ProfileService


def get_profile_service(request: Request) -> ProfileService:
    service = getattr(request.app.state, "profile_service", None)
    if service is None:
        raise RuntimeError("Profile service not initialized")
    return service


def get_principal(
    request: Request, settings: Settings = Depends(get_settings),
) -> str | None:
    return request.headers.get(settings.viewer_header)


def get_viewer_id(
    principal: str | None = Depends(get_principal),
    settings: Settings = Depends(get_settings),
) -> ViewerId:
    """Viewer identity for interaction recording (anonymous policy applies)."""
    return resolve_viewer_id(principal, settings.anonymous_viewer_policy)


def require_principal(operation: str) -> Callable[..., ViewerId]:
    """Dependency factory: authenticated principal or PrincipalRequiredError."""

    def dependency(principal: str | None = Depends(get_principal)) -> ViewerId:
        if principal is None:
            raise PrincipalRequiredError(operation)
        return resolve_viewer_id(principal, AnonymousViewerPolicy.REJECT)

    return dependency
