# dao/database.py
from typing import List, Optional

from dao import (
    audit as audit_dao,
    dashboard as dashboard_dao,
    inventory as inv_dao,
    material as material_dao,
    requisition as requisition_dao,
    user as user_dao,
)
from dao.base import (
    Storage,
    check_quantity,
    check_requisition_update,
    material_fields,
    movement_values,
    normalize_email,
    split_name,
    user_fields,
)
from utils.errors import NotFound


class DatabaseStorage(Storage):
    """Storage backed by the Flask-SQLAlchemy session (needs an app context)."""

    name = "database"

    # ---------- users ----------
    def get_user(self, user_id):
        return user_dao.get_user(user_id)

    def get_user_by_email(self, email):
        return user_dao.get_user_by_email(email)

    def upsert_user(self, **fields):
        return user_dao.upsert_user(self.now(), **user_fields(fields))

    def create_employee_user(self, name, email, password_hash):
        first_name, last_name = split_name(name)
        return user_dao.create_employee_user(
            normalize_email(email), first_name, last_name, password_hash, self.now()
        )

    def list_users(self, role=None):
        return user_dao.list_users(role)

    # ---------- materials ----------
    def list_materials(self):
        return material_dao.list_materials()

    def get_material(self, material_id):
        return material_dao.get_material(material_id)

    def create_material(self, data):
        return material_dao.create_material(material_fields(data), self.now())

    def update_material(self, material_id, data):
        return material_dao.update_material(material_id, material_fields(data), self.now())

    def delete_material(self, material_id):
        material_dao.delete_material(material_id)

    def list_low_stock_materials(self):
        return material_dao.list_low_stock_materials()

    # ---------- stock movements ----------
    def create_stock_movement(self, data):
        return inv_dao.create_stock_movement(movement_values(data), self.now())

    def list_stock_movements(self, material_id=None):
        return inv_dao.list_stock_movements(material_id)

    # ---------- requisitions ----------
    def create_requisition(self, data):
        fields = dict(data, quantity=check_quantity(data.get("quantity")))
        return requisition_dao.create_requisition(fields, self.now())

    def get_requisition(self, requisition_id):
        return requisition_dao.get_requisition(requisition_id)

    def list_requisitions(self, employee_id=None):
        return requisition_dao.list_requisitions(employee_id)

    def list_requisitions_with_details(self, employee_id=None):
        return requisition_dao.list_requisitions_with_details(employee_id)

    def update_requisition(self, requisition_id, data):
        req = requisition_dao.get_requisition(requisition_id)
        if req is None:
            raise NotFound("Requisition not found")
        fields = check_requisition_update(req, data)
        return requisition_dao.update_requisition(requisition_id, fields, self.now())

    def sign_requisition(self, requisition_id, device=None, ip=None, signer_id=None):
        return requisition_dao.sign_requisition(
            requisition_id, device, ip, signer_id, self.now()
        )

    # ---------- dashboard ----------
    def get_dashboard_stats(self, start=None, end=None):
        return dashboard_dao.get_dashboard_stats(start, end)

    # ---------- audit ----------
    def create_audit_log(self, data):
        return audit_dao.create_audit_log(data, self.now())

    def list_audit_logs(self, limit: Optional[int] = None) -> List:
        return audit_dao.list_audit_logs(limit or self.audit_log_limit)
