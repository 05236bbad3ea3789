import logging
from flask import Blueprint, g, jsonify, request, session
from dao.storage import get_storage
from db.models.requisition import RequisitionStatus
from db.models.user import UserRole
from schemas.auth import EmployeeRegistration, LoginRequest
from utils import audit
from utils.auth import EMPLOYEE_SESSION_KEY, current_employee, employee_only
from utils.errors import Unauthenticated, ValidationError
from utils.passwords import hash_password, verify_password
from utils.validation import parse_body

logger = logging.getLogger(__name__)

employee_bp = Blueprint("employee_api", __name__, url_prefix="/api/employee")


@employee_bp.route("/register", methods=["POST"])
def register():
    payload = parse_body(EmployeeRegistration)
    storage = get_storage()
    if storage.get_user_by_email(payload.email) is not None:
        raise ValidationError(
            "Email already registered",
            errors=[{"field": "email", "message": "Email already registered"}],
        )
    user = storage.create_employee_user(
        name=payload.name,
        email=payload.email,
        password_hash=hash_password(payload.password),
    )
    return jsonify(user.to_dict()), 201


@employee_bp.route("/login", methods=["POST"])
def login():
    payload = parse_body(LoginRequest)
    user = get_storage().get_user_by_email(payload.email)

    if (
        not user
        or user.role != UserRole.EMPLOYEE
        or not verify_password(payload.password, user.password_hash)
    ):
        logger.warning("Failed employee login for %s", payload.email)
        raise Unauthenticated("Invalid credentials")

    session[EMPLOYEE_SESSION_KEY] = user.id
    return jsonify(user.to_dict())


@employee_bp.route("/logout", methods=["POST"])
def logout():
    session.pop(EMPLOYEE_SESSION_KEY, None)
    return jsonify({"message": "Logged out"})


@employee_bp.route("/me")
def me():
    return jsonify(current_employee().to_dict())


@employee_bp.route("/requisitions")
@employee_only
def my_requisitions():
    return jsonify(get_storage().list_requisitions_with_details(g.employee_user.id))


@employee_bp.route("/requisitions/<requisition_id>/sign", methods=["POST"])
@employee_only
def sign_requisition(requisition_id: str):
    employee_id = g.employee_user.id
    req = get_storage().sign_requisition(
        requisition_id,
        device=request.headers.get("User-Agent"),
        ip=request.remote_addr,
        signer_id=employee_id,
    )
    audit.record(
        employee_id,
        "SIGN",
        "REQUISITION",
        requisition_id,
        {"status": RequisitionStatus.SIGNED.value},
    )
    return jsonify(req.to_dict())
