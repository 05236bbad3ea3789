"""Schemas for requisition endpoints."""

from __future__ import annotations

from typing import Optional

from pydantic import Field

from db.models.base import INT_MAX
from db.models.requisition import RequisitionStatus
from schemas.base import Payload


class RequisitionCreate(Payload):
    employee_id: str = Field(..., min_length=1)
    material_id: str = Field(..., min_length=1)
    quantity: int = Field(..., gt=0, le=INT_MAX)
    note: Optional[str] = None


class RequisitionUpdate(Payload):
    quantity: Optional[int] = Field(None, gt=0, le=INT_MAX)
    note: Optional[str] = None
    status: Optional[RequisitionStatus] = None


__all__ = ["RequisitionCreate", "RequisitionUpdate"]
