from datetime import datetime, timezone
from flask import Blueprint, jsonify, request
from flask_login import login_required
from dao.storage import get_storage
from utils.errors import ValidationError

dashboard_bp = Blueprint("dashboard_api", __name__, url_prefix="/api/dashboard")


def _parse_date(name: str):
    raw = request.args.get(name)
    if not raw:
        return None
    try:
        value = datetime.fromisoformat(raw.replace("Z", "+00:00"))
    except ValueError:
        raise ValidationError(
            "Invalid data", errors=[{"field": name, "message": "Expected an ISO date"}]
        )
    if value.tzinfo is not None:
        # stored timestamps are naive UTC
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


@dashboard_bp.route("/stats")
@login_required
def stats():
    start = _parse_date("startDate")
    end = _parse_date("endDate")
    if start and end and start > end:
        raise ValidationError(
            "Invalid data",
            errors=[{"field": "startDate", "message": "startDate is after endDate"}],
        )
    return jsonify(get_storage().get_dashboard_stats(start, end))


@dashboard_bp.route("/low-stock")
@login_required
def low_stock():
    return jsonify([m.to_dict() for m in get_storage().list_low_stock_materials()])
