import logging
from datetime import datetime
from typing import Optional, List, Dict
from sqlalchemy import update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import joinedload
from configs import db
from db.models.inventory import MovementType
from db.models.material import Material
from db.models.requisition import Requisition, RequisitionStatus
from db.models.user import User, UserRole
from dao import inventory as inv_dao
from dao.base import requisition_details
from utils.errors import AlreadySigned, Conflict, Forbidden, NotFound, ValidationError

logger = logging.getLogger(__name__)


def list_requisitions(employee_id: Optional[str] = None) -> List[Requisition]:
    q = Requisition.query
    if employee_id:
        q = q.filter(Requisition.employee_id == employee_id)
    return q.order_by(Requisition.created_at.desc()).all()


def list_requisitions_with_details(employee_id: Optional[str] = None) -> List[Dict]:
    q = Requisition.query.options(
        joinedload(Requisition.material), joinedload(Requisition.created_by)
    )
    if employee_id:
        q = q.filter(Requisition.employee_id == employee_id)
    rows = q.order_by(Requisition.created_at.desc()).all()
    return [requisition_details(r, r.material, r.created_by) for r in rows]


def get_requisition(requisition_id: str) -> Optional[Requisition]:
    return db.session.get(Requisition, requisition_id)


def create_requisition(fields: dict, now: datetime) -> Requisition:
    employee = db.session.get(User, fields["employee_id"])
    if employee is None or employee.role != UserRole.EMPLOYEE:
        raise ValidationError(
            "Requisition employee must be a user with role EMPLOYEE",
            errors=[{"field": "employeeId", "message": "Not an employee"}],
        )
    if db.session.get(Material, fields["material_id"]) is None:
        raise NotFound("Material not found")
    req = Requisition(
        employee_id=fields["employee_id"],
        material_id=fields["material_id"],
        quantity=fields["quantity"],
        note=fields.get("note"),
        status=RequisitionStatus.PENDING,
        created_by_id=fields["created_by_id"],
        created_at=now,
        updated_at=now,
    )
    db.session.add(req)
    _commit()
    return req


def update_requisition(requisition_id: str, fields: dict, now: datetime) -> Requisition:
    req = get_requisition(requisition_id)
    if req is None:
        raise NotFound("Requisition not found")
    for k, v in fields.items():
        setattr(req, k, v)
    req.updated_at = now
    _commit()
    return req


def sign_requisition(
    requisition_id: str,
    device: Optional[str],
    ip: Optional[str],
    signer_id: Optional[str],
    now: datetime,
) -> Requisition:
    req = get_requisition(requisition_id)
    if req is None:
        raise NotFound("Requisition not found")
    if signer_id and req.employee_id != signer_id:
        raise Forbidden("Unauthorized to sign this requisition")
    if req.status == RequisitionStatus.SIGNED:
        raise AlreadySigned()
    if req.status == RequisitionStatus.CANCELLED:
        raise Conflict("Cancelled requisitions cannot be signed")

    try:
        # guarded on PENDING: a concurrent signer that commits first wins
        result = db.session.execute(
            update(Requisition)
            .where(
                Requisition.id == requisition_id,
                Requisition.status == RequisitionStatus.PENDING,
            )
            .values(
                status=RequisitionStatus.SIGNED,
                signed_at=now,
                signed_by_device=device,
                signed_by_ip=ip,
                updated_at=now,
            )
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            raise AlreadySigned()
        inv_dao.add_movement(
            {
                "material_id": req.material_id,
                "type": MovementType.OUTBOUND,
                "quantity": req.quantity,
                "unit_price": None,
                "note": req.signed_note(),
                "user_id": req.employee_id,
                "requisition_id": req.id,
            },
            now,
        )
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise

    logger.info("Requisition %s signed (material=%s qty=%s)", req.id, req.material_id, req.quantity)
    db.session.refresh(req)
    return req


def _commit():
    try:
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        raise
