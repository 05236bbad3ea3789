from configs import db
import enum
from db.models.base import SerializerMixin, new_id, utcnow


class RequisitionStatus(enum.Enum):
    PENDING = "PENDING"
    SIGNED = "SIGNED"
    CANCELLED = "CANCELLED"


class Requisition(db.Model, SerializerMixin):
    __tablename__ = "requisition"
    id = db.Column(db.String(36), primary_key=True, default=new_id)
    employee_id = db.Column(
        db.String(36), db.ForeignKey("user_account.id"), nullable=False, index=True
    )
    material_id = db.Column(db.String(36), db.ForeignKey("material.id"), nullable=False)
    quantity = db.Column(db.Integer, nullable=False)
    note = db.Column(db.Text)
    status = db.Column(
        db.Enum(RequisitionStatus, name="requisitionstatus"),
        default=RequisitionStatus.PENDING,
        nullable=False,
    )  # pending -> signed | cancelled
    created_by_id = db.Column(
        db.String(36), db.ForeignKey("user_account.id"), nullable=False
    )
    signed_at = db.Column(db.DateTime)
    signed_by_device = db.Column(db.String(500))
    signed_by_ip = db.Column(db.String(64))
    created_at = db.Column(db.DateTime, default=utcnow, index=True)
    updated_at = db.Column(db.DateTime, default=utcnow)

    employee = db.relationship("User", foreign_keys=[employee_id])
    created_by = db.relationship("User", foreign_keys=[created_by_id])
    material = db.relationship("Material")

    def signed_note(self) -> str:
        if self.note:
            return f"Requisition signed - {self.note}"
        return "Requisition signed"
