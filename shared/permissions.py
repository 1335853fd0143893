# shared/permissions.py
import enum
from typing import Dict, FrozenSet, List


class Role(str, enum.Enum):
    STUDENT = "student"
    PARENT = "parent"
    SUBJECT_TEACHER = "subject_teacher"
    CLASS_TEACHER = "class_teacher"
    NON_TEACHING_STAFF = "non_teaching_staff"
    ACCOUNTANT = "accountant"
    PRINCIPAL = "principal"
    ADMIN = "admin"
    SUPER_ADMIN = "super_admin"


class Module(str, enum.Enum):
    DASHBOARD = "dashboard"
    STUDENTS = "students"
    TEACHERS = "teachers"
    ATTENDANCE = "attendance"
    TIMETABLE = "timetable"
    HOMEWORK = "homework"
    RESULTS = "results"
    REPORTS = "reports"
    FEES = "fees"
    PAYROLL = "payroll"
    ADMISSIONS = "admissions"
    DOCUMENTS = "documents"
    CALENDAR = "calendar"
    SETTINGS = "settings"
    USERS = "users"


class AccessLevel(str, enum.Enum):
    READ = "read"
    WRITE = "write"
    ADMIN = "admin"


READ_ONLY = frozenset({AccessLevel.READ})
READ_WRITE = frozenset({AccessLevel.READ, AccessLevel.WRITE})
FULL = frozenset({AccessLevel.READ, AccessLevel.WRITE, AccessLevel.ADMIN})

_SCHOOL_LEADERSHIP = {
    module: FULL
    for module in Module
    if module != Module.USERS
}

# Combinations missing from this table grant nothing.
ROLE_PERMISSIONS: Dict[Role, Dict[Module, FrozenSet[AccessLevel]]] = {
    Role.STUDENT: {
        Module.DASHBOARD: READ_ONLY,
        Module.TIMETABLE: READ_ONLY,
        Module.HOMEWORK: READ_ONLY,
        Module.RESULTS: READ_ONLY,
        Module.REPORTS: READ_ONLY,
    },
    Role.PARENT: {
        Module.DASHBOARD: READ_ONLY,
        Module.TIMETABLE: READ_ONLY,
        Module.HOMEWORK: READ_ONLY,
        Module.RESULTS: READ_ONLY,
        Module.REPORTS: READ_ONLY,
    },
    Role.SUBJECT_TEACHER: {
        Module.DASHBOARD: READ_ONLY,
        Module.TIMETABLE: READ_WRITE,
        Module.HOMEWORK: READ_WRITE,
        Module.RESULTS: READ_WRITE,
        Module.REPORTS: READ_ONLY,
    },
    Role.CLASS_TEACHER: {
        Module.DASHBOARD: READ_ONLY,
        Module.ATTENDANCE: READ_WRITE,
        Module.TIMETABLE: READ_WRITE,
        Module.HOMEWORK: READ_WRITE,
        Module.RESULTS: READ_WRITE,
        Module.REPORTS: READ_ONLY,
        Module.FEES: READ_ONLY,
    },
    Role.NON_TEACHING_STAFF: {
        Module.DASHBOARD: READ_ONLY,
    },
    Role.ACCOUNTANT: {
        Module.DASHBOARD: READ_ONLY,
        Module.ATTENDANCE: READ_ONLY,
        Module.FEES: FULL,
        Module.PAYROLL: FULL,
    },
    Role.PRINCIPAL: dict(_SCHOOL_LEADERSHIP),
    Role.ADMIN: dict(_SCHOOL_LEADERSHIP),
    Role.SUPER_ADMIN: {module: FULL for module in Module},
}


def _coerce(enum_cls, value):
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except (ValueError, TypeError):
        return None


def has_module_access(role, module, level=AccessLevel.READ) -> bool:
    """
    Return whether `role` holds `level` access on `module`.

    Accepts enum members or their string values. Unknown roles, modules
    or levels resolve to False instead of raising.
    """
    role = _coerce(Role, role)
    module = _coerce(Module, module)
    level = _coerce(AccessLevel, level)
    if role is None or module is None or level is None:
        return False
    return level in ROLE_PERMISSIONS.get(role, {}).get(module, frozenset())


def get_accessible_modules(role) -> List[Module]:
    return [module for module in Module if has_module_access(role, module, AccessLevel.READ)]


def get_permission_matrix(role) -> Dict[str, Dict[str, bool]]:
    return {
        module.value: {
            level.value: has_module_access(role, module, level)
            for level in AccessLevel
        }
        for module in Module
    }
