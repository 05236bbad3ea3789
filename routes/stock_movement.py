from flask import Blueprint, jsonify, request
from flask_login import login_required, current_user
from dao.storage import get_storage
from schemas.stock import StockMovementCreate
from utils import audit
from utils.validation import parse_body

stock_bp = Blueprint("stock_api", __name__, url_prefix="/api/stock-movements")


@stock_bp.route("")
@login_required
def movements_list():
    material_id = request.args.get("materialId") or None
    movements = get_storage().list_stock_movements(material_id)
    return jsonify([mv.to_dict() for mv in movements])


@stock_bp.route("", methods=["POST"])
@login_required
def movements_add():
    payload = parse_body(StockMovementCreate)
    # the acting user always comes from the session
    data = dict(payload.model_dump(), user_id=current_user.id)
    mv = get_storage().create_stock_movement(data)
    audit.record(
        current_user.id,
        "CREATE",
        "STOCK_MOVEMENT",
        mv.id,
        dict(payload.model_dump(mode="json", by_alias=True), userId=current_user.id),
    )
    return jsonify(mv.to_dict()), 201
