from flask import Blueprint, jsonify, request
from dao.storage import get_storage
from db.models.user import UserRole
from utils.auth import roles_required
from utils.errors import ValidationError

user_bp = Blueprint("user_api", __name__, url_prefix="/api/users")


@user_bp.route("")
@roles_required(UserRole.ADMIN, UserRole.STOCK)
def users_list():
    # ?role=EMPLOYEE feeds the requisition form's employee picker
    role = request.args.get("role") or None
    if role is not None and role not in UserRole.__members__:
        raise ValidationError(
            "Invalid data", errors=[{"field": "role", "message": f"Unknown role {role!r}"}]
        )
    users = get_storage().list_users(role)
    return jsonify([u.to_dict() for u in users])
