# dao/base.py
"""Storage contract shared by the relational and in-memory backends."""
import abc
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Callable, List, Optional

from db.models.audit import AuditLog
from db.models.base import INT_MAX, utcnow
from db.models.inventory import MovementType, StockMovement
from db.models.material import Material
from db.models.requisition import Requisition, RequisitionStatus
from db.models.user import User, UserRole
from utils.errors import Conflict, ValidationError

MATERIAL_FIELDS = ("name", "code", "unit", "unit_price", "minimum_stock")
REQUISITION_UPDATE_FIELDS = ("quantity", "note", "status")


class Storage(abc.ABC):
    name = "abstract"

    def __init__(
        self, clock: Callable[[], datetime] = utcnow, audit_log_limit: int = 1000
    ):
        self.now = clock
        self.audit_log_limit = audit_log_limit

    # ---------- users ----------
    @abc.abstractmethod
    def get_user(self, user_id: str) -> Optional[User]: ...

    @abc.abstractmethod
    def get_user_by_email(self, email: str) -> Optional[User]: ...

    @abc.abstractmethod
    def upsert_user(self, **fields) -> User: ...

    @abc.abstractmethod
    def create_employee_user(self, name: str, email: str, password_hash: str) -> User: ...

    @abc.abstractmethod
    def list_users(self, role=None) -> List[User]: ...

    # ---------- materials ----------
    @abc.abstractmethod
    def list_materials(self) -> List[Material]: ...

    @abc.abstractmethod
    def get_material(self, material_id: str) -> Optional[Material]: ...

    @abc.abstractmethod
    def create_material(self, data: dict) -> Material: ...

    @abc.abstractmethod
    def update_material(self, material_id: str, data: dict) -> Material: ...

    @abc.abstractmethod
    def delete_material(self, material_id: str) -> None: ...

    @abc.abstractmethod
    def list_low_stock_materials(self) -> List[Material]: ...

    # ---------- stock movements ----------
    @abc.abstractmethod
    def create_stock_movement(self, data: dict) -> StockMovement: ...

    @abc.abstractmethod
    def list_stock_movements(
        self, material_id: Optional[str] = None
    ) -> List[StockMovement]: ...

    # ---------- requisitions ----------
    @abc.abstractmethod
    def create_requisition(self, data: dict) -> Requisition: ...

    @abc.abstractmethod
    def get_requisition(self, requisition_id: str) -> Optional[Requisition]: ...

    @abc.abstractmethod
    def list_requisitions(self, employee_id: Optional[str] = None) -> List[Requisition]: ...

    @abc.abstractmethod
    def list_requisitions_with_details(
        self, employee_id: Optional[str] = None
    ) -> List[dict]: ...

    @abc.abstractmethod
    def update_requisition(self, requisition_id: str, data: dict) -> Requisition: ...

    @abc.abstractmethod
    def sign_requisition(
        self,
        requisition_id: str,
        device: Optional[str] = None,
        ip: Optional[str] = None,
        signer_id: Optional[str] = None,
    ) -> Requisition:
        """PENDING -> SIGNED plus one OUTBOUND movement, all or nothing.

        Raises NotFound, Forbidden (signer is not the requisition's
        employee), AlreadySigned, or Conflict (requisition cancelled).
        """

    # ---------- dashboard ----------
    @abc.abstractmethod
    def get_dashboard_stats(
        self, start: Optional[datetime] = None, end: Optional[datetime] = None
    ) -> dict: ...

    # ---------- audit ----------
    @abc.abstractmethod
    def create_audit_log(self, data: dict) -> AuditLog: ...

    @abc.abstractmethod
    def list_audit_logs(self, limit: Optional[int] = None) -> List[AuditLog]: ...


# ---------- helpers shared by both backends ----------
def split_name(name: str):
    trimmed = (name or "").strip()
    first, *rest = trimmed.split() or [""]
    return first or trimmed, (" ".join(rest) or None)


def normalize_email(email: Optional[str]) -> Optional[str]:
    return email.strip().lower() if email else None


def user_fields(fields: dict) -> dict:
    fields = dict(fields)
    if fields.get("email"):
        fields["email"] = normalize_email(fields["email"])
    if fields.get("role") is not None:
        fields["role"] = _enum(UserRole, fields["role"], "role")
    return fields


def _enum(enum_cls, value, field: str):
    try:
        return enum_cls(value)
    except ValueError:
        raise ValidationError(
            f"Invalid {field}",
            errors=[{"field": field, "message": f"Unknown value {value!r}"}],
        )


def check_quantity(quantity) -> int:
    try:
        qty = int(quantity)
    except (TypeError, ValueError):
        raise ValidationError("Quantity must be a positive integer")
    if qty <= 0:
        raise ValidationError("Quantity must be a positive integer")
    if qty > INT_MAX:
        raise ValidationError(f"Quantity must not exceed {INT_MAX}")
    return qty


def check_minimum_stock(value) -> int:
    try:
        minimum = int(value or 0)
    except (TypeError, ValueError):
        raise ValidationError("Minimum stock must be an integer")
    if not 0 <= minimum <= INT_MAX:
        raise ValidationError(f"Minimum stock must be between 0 and {INT_MAX}")
    return minimum


def money(value) -> Optional[Decimal]:
    if value is None:
        return None
    try:
        price = Decimal(str(value)).quantize(Decimal("0.01"))
    except InvalidOperation:
        raise ValidationError("Invalid unit price")
    # Numeric(10, 2)
    if abs(price) >= Decimal("100000000"):
        raise ValidationError("Unit price is too large")
    return price


def material_fields(data: dict) -> dict:
    """Writable material columns; current_stock is never taken from input."""
    fields = {k: v for k, v in data.items() if k in MATERIAL_FIELDS}
    if "unit_price" in fields:
        fields["unit_price"] = money(fields["unit_price"])
    if fields.get("minimum_stock") is not None:
        fields["minimum_stock"] = check_minimum_stock(fields["minimum_stock"])
    return fields


def check_requisition_update(req: Requisition, data: dict) -> dict:
    if req.status != RequisitionStatus.PENDING:
        raise Conflict(f"Requisition is {req.status.value} and can no longer change")
    fields = {k: v for k, v in data.items() if k in REQUISITION_UPDATE_FIELDS}
    if fields.get("status") is not None:
        status = _enum(RequisitionStatus, fields["status"], "status")
        if status != RequisitionStatus.CANCELLED:
            raise ValidationError("Status can only be changed to CANCELLED here")
        fields["status"] = status
    else:
        fields.pop("status", None)
    if "quantity" in fields:
        fields["quantity"] = check_quantity(fields["quantity"])
    return fields


def movement_values(data: dict) -> dict:
    return {
        "material_id": data["material_id"],
        "type": _enum(MovementType, data.get("type"), "type"),
        "quantity": check_quantity(data.get("quantity")),
        "unit_price": money(data.get("unit_price")),
        "note": data.get("note"),
        "user_id": data["user_id"],
        "requisition_id": data.get("requisition_id"),
    }


def requisition_details(
    req: Requisition, material: Optional[Material], creator: Optional[User]
) -> dict:
    out = req.to_dict()
    out["material"] = (
        material.summary()
        if material is not None
        else {"id": req.material_id, "name": "Material", "code": "", "unit": ""}
    )
    out["createdBy"] = creator.summary() if creator is not None else None
    return out


def in_range(value: Optional[datetime], start, end) -> bool:
    if start is not None and (value is None or value < start):
        return False
    if end is not None and (value is None or value > end):
        return False
    return True
