"""
minifeed.auth.deps

FastAPI dependency functions for authentication and authorization.

Responsibilities:
- Convert a bearer token into a typed `Principal` (once per request).
- Evaluate the route authority table before the handler runs.
- Expose the process-wide issuer/verifier/guard built at startup.
"""

from __future__ import annotations

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from minifeed.auth.guard import AuthorizationGuard
from minifeed.auth.jwt import TokenIssuer, TokenVerifier
from minifeed.auth.models import Principal
from minifeed.errors import AuthenticationError

_bearer = HTTPBearer(auto_error=False)


def token_issuer(request: Request) -> TokenIssuer:
    # Built once in `minifeed.api.app.create_app`.
    return request.app.state.token_issuer  # type: ignore[attr-defined]


def token_verifier(request: Request) -> TokenVerifier:
    return request.app.state.token_verifier  # type: ignore[attr-defined]


def authorization_guard(request: Request) -> AuthorizationGuard:
    return request.app.state.guard  # type: ignore[attr-defined]


def get_principal(
    creds: HTTPAuthorizationCredentials | None = Depends(_bearer),
    verifier: TokenVerifier = Depends(token_verifier),
) -> Principal:
    # Authn: require a bearer token.
    if creds is None or not creds.credentials:
        raise AuthenticationError("Missing bearer token")
    return verifier.verify(creds.credentials)


def authorize_route(
    request: Request,
    principal: Principal = Depends(get_principal),
    guard: AuthorizationGuard = Depends(authorization_guard),
) -> Principal:
    # FastAPI sets scope["route"] to the matched APIRoute; its path is the template.
    route = request.scope.get("route")
    route_path = getattr(route, "path", request.url.path)
    guard.check_route(principal, method=request.method, route_path=route_path)
    return principal


# --- Module Notes -----------------------------------------------------------
# Protected routers declare `dependencies=[Depends(authorize_route)]`; handlers that
# need the caller take `Depends(get_principal)`, which FastAPI resolves once per request.
