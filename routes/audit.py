from flask import Blueprint, jsonify
from dao.storage import get_storage
from db.models.user import UserRole
from utils.auth import roles_required

audit_bp = Blueprint("audit_api", __name__, url_prefix="/api/audit-logs")


@audit_bp.route("")
@roles_required(UserRole.ADMIN)
def audit_list():
    logs = get_storage().list_audit_logs()
    return jsonify([a.to_dict() for a in logs])
