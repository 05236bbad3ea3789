from typing import Optional, List
from datetime import datetime
from sqlalchemy import exists
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from configs import db
from db.models.inventory import StockMovement
from db.models.material import Material
from db.models.requisition import Requisition
from utils.errors import Conflict, NotFound, ValidationError


def list_materials() -> List[Material]:
    return Material.query.order_by(Material.name.asc()).all()


def get_material(material_id: str) -> Optional[Material]:
    return db.session.get(Material, material_id)


def create_material(fields: dict, now: datetime) -> Material:
    _check_code(fields.get("code"))
    m = Material(
        name=fields["name"].strip(),
        code=fields["code"].strip(),
        unit=fields["unit"].strip(),
        unit_price=fields.get("unit_price"),
        minimum_stock=int(fields.get("minimum_stock") or 0),
        current_stock=0,
        created_at=now,
        updated_at=now,
    )
    db.session.add(m)
    _commit_unique()
    return m


def update_material(material_id: str, fields: dict, now: datetime) -> Material:
    m = get_material(material_id)
    if m is None:
        raise NotFound("Material not found")
    if fields.get("code") and fields["code"] != m.code:
        _check_code(fields["code"], exclude_id=m.id)
    for k, v in fields.items():
        if k == "minimum_stock" and v is not None:
            v = int(v)
        setattr(m, k, v)
    m.updated_at = now
    _commit_unique()
    return m


def delete_material(material_id: str) -> None:
    m = get_material(material_id)
    if m is None:
        raise NotFound("Material not found")
    if is_referenced(material_id):
        raise Conflict("Material has stock movements or requisitions and cannot be deleted")
    db.session.delete(m)
    _commit()


def is_referenced(material_id: str) -> bool:
    return db.session.query(
        exists().where(StockMovement.material_id == material_id)
    ).scalar() or db.session.query(
        exists().where(Requisition.material_id == material_id)
    ).scalar()


def list_low_stock_materials() -> List[Material]:
    return (
        Material.query.filter(Material.current_stock <= Material.minimum_stock)
        .order_by(Material.name.asc())
        .all()
    )


def _check_code(code: str | None, exclude_id: str | None = None) -> None:
    if not code:
        return
    q = Material.query.filter(Material.code == code.strip())
    if exclude_id:
        q = q.filter(Material.id != exclude_id)
    if q.first() is not None:
        raise ValidationError(f"Material code {code!r} already exists")


def _commit_unique():
    try:
        _commit()
    except IntegrityError:
        raise ValidationError("Material code already exists")


def _commit():
    try:
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        raise
