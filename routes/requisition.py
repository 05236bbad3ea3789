from flask import Blueprint, jsonify, request
from flask_login import login_required, current_user
from dao.storage import get_storage
from db.models.requisition import RequisitionStatus
from db.models.user import UserRole
from schemas.requisition import RequisitionCreate, RequisitionUpdate
from utils import audit
from utils.auth import roles_required
from utils.validation import parse_body

requisition_bp = Blueprint("requisition_api", __name__, url_prefix="/api/requisitions")


def _scope_employee_id():
    # employees only ever see their own requisitions
    if current_user.has_role(UserRole.EMPLOYEE):
        return current_user.id
    return None


@requisition_bp.route("")
@login_required
def requisition_list():
    requisitions = get_storage().list_requisitions(_scope_employee_id())
    return jsonify([r.to_dict() for r in requisitions])


@requisition_bp.route("/details")
@login_required
def requisition_details_list():
    return jsonify(get_storage().list_requisitions_with_details(_scope_employee_id()))


@requisition_bp.route("", methods=["POST"])
@login_required
def requisition_add():
    payload = parse_body(RequisitionCreate)
    data = dict(payload.model_dump(), created_by_id=current_user.id)
    req = get_storage().create_requisition(data)
    audit.record(
        current_user.id,
        "CREATE",
        "REQUISITION",
        req.id,
        dict(payload.model_dump(mode="json", by_alias=True), createdById=current_user.id),
    )
    return jsonify(req.to_dict()), 201


@requisition_bp.route("/<requisition_id>", methods=["PATCH"])
@roles_required(UserRole.ADMIN, UserRole.STOCK)
def requisition_edit(requisition_id: str):
    payload = parse_body(RequisitionUpdate)
    changes = payload.model_dump(exclude_unset=True)
    req = get_storage().update_requisition(requisition_id, changes)
    action = "CANCEL" if changes.get("status") == RequisitionStatus.CANCELLED else "UPDATE"
    audit.record(
        current_user.id,
        action,
        "REQUISITION",
        requisition_id,
        payload.model_dump(mode="json", by_alias=True, exclude_unset=True),
    )
    return jsonify(req.to_dict())


@requisition_bp.route("/<requisition_id>/sign", methods=["POST"])
@login_required
def requisition_sign(requisition_id: str):
    # staff sign on behalf of the employee; an employee account may sign only its own
    signer_id = current_user.id if current_user.has_role(UserRole.EMPLOYEE) else None
    req = get_storage().sign_requisition(
        requisition_id,
        device=request.headers.get("User-Agent"),
        ip=request.remote_addr,
        signer_id=signer_id,
    )
    audit.record(
        current_user.id,
        "SIGN",
        "REQUISITION",
        requisition_id,
        {"status": RequisitionStatus.SIGNED.value},
    )
    return jsonify(req.to_dict())
