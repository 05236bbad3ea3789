from datetime import datetime
from typing import List
from sqlalchemy.exc import SQLAlchemyError
from configs import db
from db.models.audit import AuditLog


def create_audit_log(fields: dict, now: datetime) -> AuditLog:
    log = AuditLog(
        user_id=fields["user_id"],
        action=fields["action"],
        entity_type=fields["entity_type"],
        entity_id=str(fields["entity_id"]),
        changes=fields.get("changes"),
        ip_address=fields.get("ip_address"),
        user_agent=fields.get("user_agent"),
        created_at=now,
    )
    db.session.add(log)
    _commit()
    return log


def list_audit_logs(limit: int) -> List[AuditLog]:
    return AuditLog.query.order_by(AuditLog.created_at.desc()).limit(limit).all()


def _commit():
    try:
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        raise
