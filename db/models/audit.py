from configs import db
from sqlalchemy.dialects.postgresql import JSONB
from db.models.base import SerializerMixin, new_id, utcnow


class AuditLog(db.Model, SerializerMixin):
    __tablename__ = "audit_log"
    id = db.Column(db.String(36), primary_key=True, default=new_id)
    user_id = db.Column(db.String(36), db.ForeignKey("user_account.id"), nullable=False)
    action = db.Column(db.String(30), nullable=False)  # CREATE/UPDATE/DELETE/SIGN
    entity_type = db.Column(db.String(30), nullable=False)
    entity_id = db.Column(db.String(36), nullable=False)
    changes = db.Column(db.JSON().with_variant(JSONB(), "postgresql"))
    ip_address = db.Column(db.String(64))
    user_agent = db.Column(db.String(500))
    created_at = db.Column(db.DateTime, default=utcnow, index=True)
