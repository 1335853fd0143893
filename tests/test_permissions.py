import pytest

from shared.permissions import (
    AccessLevel,
    Module,
    Role,
    ROLE_PERMISSIONS,
    get_accessible_modules,
    get_permission_matrix,
    has_module_access,
)


def test_every_role_module_level_resolves_to_a_bool():
    for role in Role:
        for module in Module:
            for level in AccessLevel:
                assert has_module_access(role, module, level) in (True, False)


def test_every_role_has_a_table_entry():
    assert set(ROLE_PERMISSIONS) == set(Role)


def test_string_values_are_accepted():
    assert has_module_access("principal", "admissions", "write") is True
    assert has_module_access("student", "admissions", "read") is False


@pytest.mark.parametrize("role, module, level", [
    ("janitor", "dashboard", "read"),
    ("admin", "canteen", "read"),
    ("admin", "dashboard", "delete"),
    (None, "dashboard", "read"),
    ("admin", None, "read"),
    (42, [], {}),
])
def test_unknown_values_are_denied_without_raising(role, module, level):
    assert has_module_access(role, module, level) is False


def test_default_level_is_read():
    assert has_module_access(Role.STUDENT, Module.TIMETABLE) is True
    assert has_module_access(Role.STUDENT, Module.FEES) is False


def test_read_only_roles_cannot_write():
    for role in (Role.STUDENT, Role.PARENT):
        for module in Module:
            assert not has_module_access(role, module, AccessLevel.WRITE)
            assert not has_module_access(role, module, AccessLevel.ADMIN)


def test_admissions_are_reserved_for_school_leadership():
    allowed = {role for role in Role if has_module_access(role, Module.ADMISSIONS, AccessLevel.WRITE)}
    assert allowed == {Role.PRINCIPAL, Role.ADMIN, Role.SUPER_ADMIN}


def test_accountant_administers_fees_and_payroll_only():
    assert has_module_access(Role.ACCOUNTANT, Module.FEES, AccessLevel.ADMIN)
    assert has_module_access(Role.ACCOUNTANT, Module.PAYROLL, AccessLevel.ADMIN)
    assert has_module_access(Role.ACCOUNTANT, Module.ATTENDANCE, AccessLevel.READ)
    assert not has_module_access(Role.ACCOUNTANT, Module.ATTENDANCE, AccessLevel.WRITE)
    assert not has_module_access(Role.ACCOUNTANT, Module.STUDENTS)


def test_class_teacher_reads_fees_but_writes_attendance():
    assert has_module_access(Role.CLASS_TEACHER, Module.FEES, AccessLevel.READ)
    assert not has_module_access(Role.CLASS_TEACHER, Module.FEES, AccessLevel.WRITE)
    assert has_module_access(Role.CLASS_TEACHER, Module.ATTENDANCE, AccessLevel.WRITE)
    assert not has_module_access(Role.SUBJECT_TEACHER, Module.ATTENDANCE)


def test_only_super_admin_manages_users():
    assert [role for role in Role if has_module_access(role, Module.USERS)] == [Role.SUPER_ADMIN]


def test_accessible_modules_follow_read_access():
    assert get_accessible_modules(Role.NON_TEACHING_STAFF) == [Module.DASHBOARD]
    assert get_accessible_modules("nobody") == []
    assert set(get_accessible_modules(Role.SUPER_ADMIN)) == set(Module)


def test_permission_matrix_covers_every_module():
    matrix = get_permission_matrix(Role.CLASS_TEACHER)

    assert set(matrix) == {module.value for module in Module}
    assert matrix["attendance"] == {"read": True, "write": True, "admin": False}
    assert matrix["payroll"] == {"read": False, "write": False, "admin": False}
