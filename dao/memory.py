# dao/memory.py
"""Volatile storage used when no DATABASE_URL is configured.

Everything lives in dicts keyed by id and is lost on restart. Records are
the same model classes the database backend uses, kept as transient
instances; every read hands out a copy so callers never share state with
the store. Mutations hold a re-entrant lock, which is what makes signing
atomic here.
"""
import logging
import threading
from typing import Dict

from dao.base import (
    Storage,
    check_quantity,
    check_requisition_update,
    in_range,
    material_fields,
    movement_values,
    normalize_email,
    requisition_details,
    split_name,
    user_fields,
)
from db.models.audit import AuditLog
from db.models.base import detached_copy, new_id
from db.models.inventory import MovementType, StockMovement, stock_delta
from db.models.material import Material
from db.models.requisition import Requisition, RequisitionStatus
from db.models.user import User, UserRole
from utils.errors import AlreadySigned, Conflict, Forbidden, NotFound, ValidationError

logger = logging.getLogger(__name__)


def _newest_first(items):
    # reversed insertion order keeps ties newest-first (sort is stable)
    return sorted(reversed(list(items)), key=lambda r: r.created_at, reverse=True)


class InMemoryStorage(Storage):
    name = "memory"

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self._lock = threading.RLock()
        self._users: Dict[str, User] = {}
        self._materials: Dict[str, Material] = {}
        self._movements: Dict[str, StockMovement] = {}
        self._requisitions: Dict[str, Requisition] = {}
        self._audit_logs: Dict[str, AuditLog] = {}

    # ---------- users ----------
    def get_user(self, user_id):
        return detached_copy(self._users.get(user_id))

    def get_user_by_email(self, email):
        normalized = normalize_email(email)
        with self._lock:
            users = list(self._users.values())
        for user in users:
            if user.email and user.email.lower() == normalized:
                return detached_copy(user)
        return None

    def upsert_user(self, **fields):
        fields = user_fields(fields)
        with self._lock:
            now = self.now()
            user_id = fields.pop("id", None) or new_id()
            existing = self._users.get(user_id)
            if existing is None:
                values = {
                    "email": None,
                    "first_name": None,
                    "last_name": None,
                    "profile_image_url": None,
                    "password_hash": None,
                    "role": UserRole.EMPLOYEE,
                    "created_at": now,
                }
            else:
                values = existing.column_values()
            values.update({k: v for k, v in fields.items() if v is not None})
            values.update(id=user_id, updated_at=now)
            if values["email"]:
                self._check_email_free(values["email"], user_id)
            user = User(**values)
            self._users[user_id] = user
            return detached_copy(user)

    def create_employee_user(self, name, email, password_hash):
        first_name, last_name = split_name(name)
        with self._lock:
            if self.get_user_by_email(email) is not None:
                raise ValidationError("Email already registered")
            return self.upsert_user(
                email=email,
                first_name=first_name,
                last_name=last_name,
                password_hash=password_hash,
                role=UserRole.EMPLOYEE,
            )

    def list_users(self, role=None):
        with self._lock:
            users = list(self._users.values())
        if role is not None:
            users = [u for u in users if u.role == UserRole(role)]
        return [detached_copy(u) for u in sorted(users, key=lambda u: u.email or "")]

    def _check_email_free(self, email, user_id):
        for other in self._users.values():
            if other.id != user_id and (other.email or "").lower() == email:
                raise ValidationError("Email already registered")

    # ---------- materials ----------
    def list_materials(self):
        with self._lock:
            materials = list(self._materials.values())
        return [detached_copy(m) for m in sorted(materials, key=lambda m: m.name)]

    def get_material(self, material_id):
        return detached_copy(self._materials.get(material_id))

    def create_material(self, data):
        fields = material_fields(data)
        with self._lock:
            self._check_code_free(fields.get("code"))
            now = self.now()
            m = Material(
                id=new_id(),
                name=fields["name"].strip(),
                code=fields["code"].strip(),
                unit=fields["unit"].strip(),
                unit_price=fields.get("unit_price"),
                minimum_stock=int(fields.get("minimum_stock") or 0),
                current_stock=0,
                created_at=now,
                updated_at=now,
            )
            self._materials[m.id] = m
            return detached_copy(m)

    def update_material(self, material_id, data):
        fields = material_fields(data)
        with self._lock:
            existing = self._materials.get(material_id)
            if existing is None:
                raise NotFound("Material not found")
            if fields.get("code") and fields["code"] != existing.code:
                self._check_code_free(fields["code"], exclude_id=material_id)
            values = existing.column_values()
            values.update(fields)
            if values.get("minimum_stock") is not None:
                values["minimum_stock"] = int(values["minimum_stock"])
            values["updated_at"] = self.now()
            m = Material(**values)
            self._materials[material_id] = m
            return detached_copy(m)

    def delete_material(self, material_id):
        with self._lock:
            if material_id not in self._materials:
                raise NotFound("Material not found")
            referenced = any(
                mv.material_id == material_id for mv in self._movements.values()
            ) or any(r.material_id == material_id for r in self._requisitions.values())
            if referenced:
                raise Conflict(
                    "Material has stock movements or requisitions and cannot be deleted"
                )
            del self._materials[material_id]

    def list_low_stock_materials(self):
        return [m for m in self.list_materials() if m.is_low_stock]

    def _check_code_free(self, code, exclude_id=None):
        if not code:
            return
        code = code.strip()
        for m in self._materials.values():
            if m.code == code and m.id != exclude_id:
                raise ValidationError(f"Material code {code!r} already exists")

    def _set_stock(self, material_id, delta):
        material = self._materials[material_id]
        values = material.column_values()
        values["current_stock"] = max(0, material.current_stock + delta)
        values["updated_at"] = self.now()
        self._materials[material_id] = Material(**values)

    # ---------- stock movements ----------
    def _add_movement(self, values):
        if values["material_id"] not in self._materials:
            raise NotFound("Material not found")
        mv = StockMovement(id=new_id(), created_at=self.now(), **values)
        self._movements[mv.id] = mv
        self._set_stock(mv.material_id, stock_delta(mv.type, mv.quantity))
        return mv

    def create_stock_movement(self, data):
        values = movement_values(data)
        with self._lock:
            return detached_copy(self._add_movement(values))

    def list_stock_movements(self, material_id=None):
        with self._lock:
            movements = list(self._movements.values())
        if material_id:
            movements = [mv for mv in movements if mv.material_id == material_id]
        return [detached_copy(mv) for mv in _newest_first(movements)]

    # ---------- requisitions ----------
    def create_requisition(self, data):
        quantity = check_quantity(data.get("quantity"))
        with self._lock:
            employee = self._users.get(data["employee_id"])
            if employee is None or employee.role != UserRole.EMPLOYEE:
                raise ValidationError(
                    "Requisition employee must be a user with role EMPLOYEE",
                    errors=[{"field": "employeeId", "message": "Not an employee"}],
                )
            if data["material_id"] not in self._materials:
                raise NotFound("Material not found")
            now = self.now()
            req = Requisition(
                id=new_id(),
                employee_id=data["employee_id"],
                material_id=data["material_id"],
                quantity=quantity,
                note=data.get("note"),
                status=RequisitionStatus.PENDING,
                created_by_id=data["created_by_id"],
                signed_at=None,
                signed_by_device=None,
                signed_by_ip=None,
                created_at=now,
                updated_at=now,
            )
            self._requisitions[req.id] = req
            return detached_copy(req)

    def get_requisition(self, requisition_id):
        return detached_copy(self._requisitions.get(requisition_id))

    def list_requisitions(self, employee_id=None):
        with self._lock:
            reqs = list(self._requisitions.values())
        if employee_id:
            reqs = [r for r in reqs if r.employee_id == employee_id]
        return [detached_copy(r) for r in _newest_first(reqs)]

    def list_requisitions_with_details(self, employee_id=None):
        with self._lock:
            return [
                requisition_details(
                    r,
                    self._materials.get(r.material_id),
                    self._users.get(r.created_by_id) if r.created_by_id else None,
                )
                for r in self.list_requisitions(employee_id)
            ]

    def update_requisition(self, requisition_id, data):
        with self._lock:
            existing = self._requisitions.get(requisition_id)
            if existing is None:
                raise NotFound("Requisition not found")
            fields = check_requisition_update(existing, data)
            values = existing.column_values()
            values.update(fields)
            values["updated_at"] = self.now()
            req = Requisition(**values)
            self._requisitions[requisition_id] = req
            return detached_copy(req)

    def sign_requisition(self, requisition_id, device=None, ip=None, signer_id=None):
        with self._lock:
            existing = self._requisitions.get(requisition_id)
            if existing is None:
                raise NotFound("Requisition not found")
            if signer_id and existing.employee_id != signer_id:
                raise Forbidden("Unauthorized to sign this requisition")
            if existing.status == RequisitionStatus.SIGNED:
                raise AlreadySigned()
            if existing.status == RequisitionStatus.CANCELLED:
                raise Conflict("Cancelled requisitions cannot be signed")
            if existing.material_id not in self._materials:
                raise NotFound("Material not found")

            now = self.now()
            values = existing.column_values()
            values.update(
                status=RequisitionStatus.SIGNED,
                signed_at=now,
                signed_by_device=device,
                signed_by_ip=ip,
                updated_at=now,
            )
            signed = Requisition(**values)
            # both writes happen under the lock after all checks passed
            self._add_movement(
                {
                    "material_id": existing.material_id,
                    "type": MovementType.OUTBOUND,
                    "quantity": existing.quantity,
                    "unit_price": None,
                    "note": existing.signed_note(),
                    "user_id": existing.employee_id,
                    "requisition_id": existing.id,
                }
            )
            self._requisitions[requisition_id] = signed
            logger.info(
                "Requisition %s signed (material=%s qty=%s)",
                signed.id,
                signed.material_id,
                signed.quantity,
            )
            return detached_copy(signed)

    # ---------- dashboard ----------
    def get_dashboard_stats(self, start=None, end=None):
        with self._lock:
            reqs = list(self._requisitions.values())
            movements = list(self._movements.values())
        low = self.list_low_stock_materials()
        return {
            "totalRequisitions": sum(1 for r in reqs if in_range(r.created_at, start, end)),
            "totalMovements": sum(
                1 for mv in movements if in_range(mv.created_at, start, end)
            ),
            "lowStockItems": len(low),
            "criticalStockItems": sum(1 for m in low if m.current_stock == 0),
        }

    # ---------- audit ----------
    def create_audit_log(self, data):
        with self._lock:
            log = AuditLog(
                id=new_id(),
                user_id=data["user_id"],
                action=data["action"],
                entity_type=data["entity_type"],
                entity_id=str(data["entity_id"]),
                changes=data.get("changes"),
                ip_address=data.get("ip_address"),
                user_agent=data.get("user_agent"),
                created_at=self.now(),
            )
            self._audit_logs[log.id] = log
            return detached_copy(log)

    def list_audit_logs(self, limit=None):
        limit = limit or self.audit_log_limit
        with self._lock:
            logs = list(self._audit_logs.values())
        return [detached_copy(a) for a in _newest_first(logs)[:limit]]
