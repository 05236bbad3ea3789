from configs import db
import enum
from db.models.base import SerializerMixin, new_id, utcnow


class MovementType(enum.Enum):
    INBOUND = "INBOUND"
    OUTBOUND = "OUTBOUND"
    ADJUSTMENT = "ADJUSTMENT"


class StockMovement(db.Model, SerializerMixin):
    """Append-only ledger entry; never updated after insert."""

    __tablename__ = "stock_movement"
    id = db.Column(db.String(36), primary_key=True, default=new_id)
    material_id = db.Column(
        db.String(36), db.ForeignKey("material.id"), nullable=False, index=True
    )
    type = db.Column(db.Enum(MovementType, name="movementtype"), nullable=False)
    quantity = db.Column(db.Integer, nullable=False)
    unit_price = db.Column(db.Numeric(10, 2))
    note = db.Column(db.Text)
    user_id = db.Column(db.String(36), db.ForeignKey("user_account.id"), nullable=False)
    # set only when the movement comes from signing a requisition
    requisition_id = db.Column(db.String(36), db.ForeignKey("requisition.id"))
    created_at = db.Column(db.DateTime, default=utcnow, index=True)
    material = db.relationship("Material")
    user = db.relationship("User")
    requisition = db.relationship("Requisition", backref="stock_movements")


def stock_delta(movement_type, quantity: int) -> int:
    """Signed change a movement applies to current_stock."""
    if MovementType(movement_type) == MovementType.OUTBOUND:
        return -int(quantity)
    return int(quantity)
