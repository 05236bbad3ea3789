# index.py
from flask import Blueprint, jsonify
from dao.storage import get_storage

main_bp = Blueprint("main", __name__)


@main_bp.route("/api/health")
def health():
    return jsonify({"status": "ok", "storage": get_storage().name})
