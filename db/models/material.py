from configs import db
from db.models.base import SerializerMixin, new_id, utcnow


class Material(db.Model, SerializerMixin):
    __tablename__ = "material"

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    name = db.Column(db.Text, nullable=False)
    code = db.Column(db.String(60), unique=True, nullable=False)
    unit = db.Column(db.String(20), nullable=False)  # kg, un, l...
    unit_price = db.Column(db.Numeric(10, 2))
    minimum_stock = db.Column(db.Integer, default=0, nullable=False)
    # only ever changed through stock movements, never below zero
    current_stock = db.Column(db.Integer, default=0, nullable=False)
    created_at = db.Column(db.DateTime, default=utcnow)
    updated_at = db.Column(db.DateTime, default=utcnow)

    def summary(self) -> dict:
        return {"id": self.id, "name": self.name, "code": self.code, "unit": self.unit}

    @property
    def is_low_stock(self) -> bool:
        return self.current_stock <= self.minimum_stock
