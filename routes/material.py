from flask import Blueprint, jsonify
from flask_login import login_required, current_user
from dao.storage import get_storage
from schemas.material import MaterialCreate, MaterialUpdate
from utils import audit
from utils.errors import NotFound
from utils.validation import parse_body

material_bp = Blueprint("material_api", __name__, url_prefix="/api/materials")


@material_bp.route("")
@login_required
def materials_list():
    materials = get_storage().list_materials()
    return jsonify([m.to_dict() for m in materials])


@material_bp.route("/<material_id>")
@login_required
def materials_get(material_id: str):
    m = get_storage().get_material(material_id)
    if not m:
        raise NotFound("Material not found")
    return jsonify(m.to_dict())


@material_bp.route("", methods=["POST"])
@login_required
def materials_add():
    payload = parse_body(MaterialCreate)
    m = get_storage().create_material(payload.model_dump())
    audit.record(
        current_user.id,
        "CREATE",
        "MATERIAL",
        m.id,
        payload.model_dump(mode="json", by_alias=True),
    )
    return jsonify(m.to_dict()), 201


@material_bp.route("/<material_id>", methods=["PUT", "PATCH"])
@login_required
def materials_edit(material_id: str):
    payload = parse_body(MaterialUpdate)
    fields = payload.changes()
    m = get_storage().update_material(material_id, fields)
    audit.record(
        current_user.id,
        "UPDATE",
        "MATERIAL",
        material_id,
        payload.model_dump(mode="json", by_alias=True, exclude_unset=True),
    )
    return jsonify(m.to_dict())


@material_bp.route("/<material_id>", methods=["DELETE"])
@login_required
def materials_delete(material_id: str):
    get_storage().delete_material(material_id)
    audit.record(current_user.id, "DELETE", "MATERIAL", material_id)
    return jsonify({"message": "Material deleted successfully"})
