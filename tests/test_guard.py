"""
tests.test_guard

Authorization guard: route authority table, role gate, ownership-or-admin.
"""

from __future__ import annotations

import pytest

from minifeed.auth.guard import ROUTE_AUTHORITIES, AuthorizationGuard
from minifeed.auth.models import ADMIN_AUTHORITY, Principal, RoleName, authorities_from_scope
from minifeed.errors import AuthorizationError

ADMIN = Principal(subject="admin-id", authorities=authorities_from_scope("ADMIN"))
ALICE = Principal(subject="alice-id", authorities=authorities_from_scope("BASIC"))


def test_scope_maps_to_prefixed_authorities() -> None:
    assert authorities_from_scope("ADMIN  BASIC") == frozenset({"SCOPE_ADMIN", "SCOPE_BASIC"})
    assert authorities_from_scope("") == frozenset()
    assert RoleName.admin.authority == ADMIN_AUTHORITY == "SCOPE_ADMIN"
    assert (RoleName.admin.role_id, RoleName.basic.role_id) == (1, 2)


def test_listing_users_requires_admin() -> None:
    assert ROUTE_AUTHORITIES[("GET", "/users")] == ADMIN_AUTHORITY
    guard = AuthorizationGuard()

    guard.check_route(ADMIN, method="GET", route_path="/users")
    with pytest.raises(AuthorizationError):
        guard.check_route(ALICE, method="get", route_path="/users")


def test_routes_outside_table_only_need_authentication() -> None:
    guard = AuthorizationGuard()
    assert guard.required_authority("GET", "/feed") is None
    guard.check_route(ALICE, method="GET", route_path="/feed")
    guard.check_route(ALICE, method="DELETE", route_path="/posts/{post_id}")


def test_custom_rule_table() -> None:
    guard = AuthorizationGuard({("post", "/reports"): "SCOPE_AUDITOR"})
    auditor = Principal(subject="x", authorities=frozenset({"SCOPE_AUDITOR"}))
    guard.check_route(auditor, method="POST", route_path="/reports")
    with pytest.raises(AuthorizationError):
        guard.check_route(ADMIN, method="POST", route_path="/reports")


def test_owner_may_mutate_own_resource() -> None:
    AuthorizationGuard().require_owner_or_admin(ALICE, owner_id="alice-id")


def test_admin_may_mutate_any_resource() -> None:
    AuthorizationGuard().require_owner_or_admin(ADMIN, owner_id="alice-id")


def test_non_owner_without_admin_is_denied() -> None:
    bob = Principal(subject="bob-id", authorities=authorities_from_scope("BASIC"))
    with pytest.raises(AuthorizationError):
        AuthorizationGuard().require_owner_or_admin(bob, owner_id="alice-id")
