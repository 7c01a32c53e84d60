"""
minifeed.auth.guard

Authorization guard.

Responsibilities:
- Hold the explicit (method, route) -> required authority table.
- Role gate: require an authority on the principal.
- Ownership-or-admin: allow resource mutation by its owner or an ADMIN.
"""

from __future__ import annotations

from collections.abc import Mapping

from minifeed.auth.models import ADMIN_AUTHORITY, Principal
from minifeed.errors import AuthorizationError
from minifeed.observability.logging import get_logger

log = get_logger(__name__)

RouteKey = tuple[str, str]

# Route templates as declared on the routers (FastAPI `route.path`).
ROUTE_AUTHORITIES: Mapping[RouteKey, str] = {
    ("GET", "/users"): ADMIN_AUTHORITY,
}


class AuthorizationGuard:
    def __init__(self, rules: Mapping[RouteKey, str] = ROUTE_AUTHORITIES) -> None:
        self._rules = {
            (method.upper(), path): authority for (method, path), authority in rules.items()
        }

    def required_authority(self, method: str, route_path: str) -> str | None:
        return self._rules.get((method.upper(), route_path))

    def check_route(self, principal: Principal, *, method: str, route_path: str) -> None:
        # Routes absent from the table only need an authenticated principal.
        authority = self.required_authority(method, route_path)
        if authority is not None:
            self.require_authority(principal, authority)

    def require_authority(self, principal: Principal, authority: str) -> None:
        if not principal.has_authority(authority):
            log.info("authorization_denied", sub=principal.subject, required=authority)
            raise AuthorizationError("Insufficient authority")

    def require_owner_or_admin(self, principal: Principal, *, owner_id: str) -> None:
        # Callers check the resource exists first; a missing resource is a 404 for everyone.
        if principal.subject == owner_id or principal.is_admin:
            return
        log.info("authorization_denied", sub=principal.subject, owner=owner_id)
        raise AuthorizationError("Not the owner of this resource")


# --- Module Notes -----------------------------------------------------------
# Add a row to ROUTE_AUTHORITIES rather than checking roles inside handlers.
