# utils/auth.py
from functools import wraps
from flask import g, session
from flask_login import current_user
from dao.storage import get_storage
from db.models.user import UserRole
from utils.errors import Forbidden, Unauthenticated

# session key of the employee self-service portal (separate from flask-login)
EMPLOYEE_SESSION_KEY = "employee_user_id"

ROLE_PERMISSIONS = {
    UserRole.ADMIN: frozenset(
        {"dashboard", "materials", "stock_movements", "requisitions", "audit_logs", "users"}
    ),
    UserRole.STOCK: frozenset({"dashboard", "materials", "stock_movements", "requisitions"}),
    UserRole.EMPLOYEE: frozenset({"requisitions"}),
}


def permissions_for(role) -> list:
    return sorted(ROLE_PERMISSIONS.get(UserRole(role), ()))


def roles_required(*roles):
    def deco(fn):
        @wraps(fn)
        def inner(*a, **kw):
            if not current_user.is_authenticated:
                raise Unauthenticated()
            if not current_user.has_role(*roles):
                raise Forbidden()
            return fn(*a, **kw)

        return inner

    return deco


def current_employee():
    """Resolve the employee portal session, dropping it if it went stale."""
    employee_id = session.get(EMPLOYEE_SESSION_KEY)
    if not employee_id:
        raise Unauthenticated()
    user = get_storage().get_user(employee_id)
    if user is None or user.role != UserRole.EMPLOYEE:
        session.pop(EMPLOYEE_SESSION_KEY, None)
        raise Forbidden("Access restricted to employees")
    return user


def employee_only(fn):
    @wraps(fn)
    def inner(*a, **kw):
        g.employee_user = current_employee()
        return fn(*a, **kw)

    return inner
