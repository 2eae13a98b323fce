from types import SimpleNamespace

from core.permissions import (
    ROLE_PERMISSIONS,
    Capability,
    has_permission,
    permissions_for,
)


def test_roles_are_closed_set():
    assert set(ROLE_PERMISSIONS) == {"admin", "manager", "staff"}


def test_staff_permissions():
    staff = SimpleNamespace(role="staff")
    assert has_permission(staff, "view_inventory")
    assert has_permission(staff, "add_inventory")
    assert not has_permission(staff, "edit_inventory")
    assert not has_permission(staff, "view_sales")


def test_manager_cannot_manage_users_or_delete():
    manager = SimpleNamespace(role="manager")
    assert has_permission(manager, "view_sales")
    assert has_permission(manager, "edit_inventory")
    assert not has_permission(manager, "delete_inventory")
    assert not has_permission(manager, "manage_users")


def test_admin_has_everything():
    every = set().union(*ROLE_PERMISSIONS.values())
    assert permissions_for("admin") == frozenset(every)


def test_no_user_and_unknown_role():
    assert not has_permission(None, "view_inventory")
    assert permissions_for("owner") == frozenset()
    assert not has_permission(SimpleNamespace(role="owner"), "view_inventory")


def test_capability_for_user():
    cap = Capability.for_user(SimpleNamespace(role="manager"))
    assert cap.can("view_reports")
    assert not cap.can("edit_settings")
