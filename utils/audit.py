# utils/audit.py
import logging
from flask import request
from dao.storage import get_storage

logger = logging.getLogger(__name__)


def record(user_id: str, action: str, entity_type: str, entity_id: str, changes=None):
    """Append an audit entry for a mutation that already succeeded.

    A failed write is logged and dropped; the mutation itself stands.
    """
    try:
        return get_storage().create_audit_log(
            {
                "user_id": user_id,
                "action": action,
                "entity_type": entity_type,
                "entity_id": entity_id,
                "changes": changes,
                "ip_address": request.remote_addr,
                "user_agent": request.headers.get("User-Agent"),
            }
        )
    except Exception:
        logger.exception(
            "Audit log write failed: %s %s %s by %s", action, entity_type, entity_id, user_id
        )
        return None
