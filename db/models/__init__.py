from .user import User, UserRole
from .material import Material
from .inventory import StockMovement, MovementType
from .requisition import Requisition, RequisitionStatus
from .audit import AuditLog

__all__ = [n for n in dir() if n[:1].isupper()]
