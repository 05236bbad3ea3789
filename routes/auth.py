import logging
from flask import Blueprint, jsonify
from flask_login import login_user, logout_user, current_user, login_required
from dao.storage import get_storage
from schemas.auth import LoginRequest
from utils.auth import permissions_for
from utils.errors import Unauthenticated
from utils.passwords import verify_password
from utils.validation import parse_body

logger = logging.getLogger(__name__)

auth_bp = Blueprint("auth", __name__, url_prefix="/api/auth")


@auth_bp.route("/login", methods=["POST"])
def login():
    payload = parse_body(LoginRequest)
    user = get_storage().get_user_by_email(payload.email)

    if not user or not verify_password(payload.password, user.password_hash):
        logger.warning("Failed login for %s", payload.email)
        raise Unauthenticated("Invalid credentials")

    login_user(user, remember=True)
    return jsonify(_user_payload(user))


@auth_bp.route("/logout", methods=["POST"])
def logout():
    if current_user.is_authenticated:
        logout_user()
    return jsonify({"message": "Logged out"})


@auth_bp.route("/user")
@login_required
def me():
    return jsonify(_user_payload(current_user))


def _user_payload(user) -> dict:
    data = user.to_dict()
    data["permissions"] = permissions_for(user.role)
    return data
