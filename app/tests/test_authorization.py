"""
Tests for the authorization evaluator and route guards
"""
from types import SimpleNamespace

import pytest

from app.services.authorization_service import (
    ALL_PERMISSIONS,
    CapabilityMode,
    Requirement,
    authorize,
    resolve_grants,
)


def role(*codes, is_superuser=False):
    return SimpleNamespace(
        is_superuser=is_superuser,
        permissions=[SimpleNamespace(code=c) for c in codes],
    )


VIEW_AND_UPDATE = Requirement.of("leaves.view", "leaves.update")
VIEW_OR_UPDATE = Requirement.of("leaves.view", "leaves.update", mode=CapabilityMode.ANY)


def test_superuser_granted_without_attachments():
    assert authorize([role(is_superuser=True)], VIEW_AND_UPDATE)
    assert authorize([role(is_superuser=True)], Requirement.of("anything.at_all"))


def test_superuser_resolves_to_all_permissions():
    assert resolve_grants([role("users.view"), role(is_superuser=True)]) is ALL_PERMISSIONS
    assert "whatever" in ALL_PERMISSIONS


def test_all_mode_requires_every_code():
    assert not authorize([role("leaves.view")], VIEW_AND_UPDATE)
    assert authorize([role("leaves.view", "leaves.update")], VIEW_AND_UPDATE)


def test_any_mode_requires_one_code():
    assert authorize([role("leaves.view")], VIEW_OR_UPDATE)
    assert not authorize([role("users.view")], VIEW_OR_UPDATE)


def test_grants_are_unioned_across_roles():
    roles = [role("leaves.view"), role("leaves.update")]
    assert resolve_grants(roles) == frozenset({"leaves.view", "leaves.update"})
    assert authorize(roles, VIEW_AND_UPDATE)


def test_empty_requirement_allows_everyone():
    assert authorize(None, Requirement())
    assert authorize([], Requirement.of(" ", ""))


def test_no_principal_or_no_roles_denied():
    assert not authorize(None, Requirement.of("leaves.view"))
    assert not authorize([], Requirement.of("leaves.view"))


@pytest.mark.parametrize(
    "annotation, codes, mode",
    [
        ("roles.view,roles.update", ("roles.view", "roles.update"), CapabilityMode.ALL),
        ("any:leaves.view|leaves.update", ("leaves.view", "leaves.update"), CapabilityMode.ANY),
        ("ALL: a , b | a", ("a", "b"), CapabilityMode.ALL),
        ("leaves.view", ("leaves.view",), CapabilityMode.ALL),
    ],
)
def test_parse_annotation(annotation, codes, mode):
    requirement = Requirement.parse(annotation)
    assert requirement.codes == codes
    assert requirement.mode == mode


def test_route_requires_authentication(client, db):
    response = client.get("/api/v1/roles")
    assert response.status_code == 401
    body = response.json()
    assert body["success"] is False
    assert body["code"] == 401


def test_route_rejects_garbage_token(client, db):
    response = client.get("/api/v1/roles", headers={"Authorization": "Bearer not-a-jwt"})
    assert response.status_code == 401


def test_route_forbidden_without_capability(client, employee, headers_for):
    response = client.get("/api/v1/roles", headers=headers_for(employee))
    assert response.status_code == 403
    assert response.json()["message"] == "You do not have sufficient privileges to perform this action."


def test_route_allowed_with_capability(client, role_factory, user_factory, headers_for):
    viewer = user_factory("viewer@example.com", roles=[role_factory("Viewer", codes=["roles.view"])])
    response = client.get("/api/v1/roles", headers=headers_for(viewer))
    assert response.status_code == 200
    assert response.json()["success"] is True


def test_any_mode_route_accepts_either_code(client, role_factory, user_factory, headers_for, sick_policy, db):
    from datetime import date
    from app.models.leave import Leave, LeaveStatus

    leave = Leave(
        user_id=sick_policy.user_id,
        leave_type_id=sick_policy.leave_type_id,
        from_date=date(2025, 1, 1),
        to_date=date(2025, 1, 2),
        total_days=2,
        status=LeaveStatus.PENDING,
    )
    db.add(leave)
    db.commit()

    editor = user_factory("editor@example.com", roles=[role_factory("Editor", codes=["leaves.update"])])
    outsider = user_factory("outsider@example.com", roles=[role_factory("Outsider", codes=["users.view"])])

    assert client.get(f"/api/v1/leaves/{leave.id}", headers=headers_for(editor)).status_code == 200
    assert client.get(f"/api/v1/leaves/{leave.id}", headers=headers_for(outsider)).status_code == 403
    # the list itself still needs leaves.view
    assert client.get("/api/v1/leaves", headers=headers_for(editor)).status_code == 403
