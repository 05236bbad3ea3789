"""Schemas for stock movement endpoints."""

from __future__ import annotations

from decimal import Decimal
from typing import Optional

from pydantic import Field

from db.models.base import INT_MAX
from db.models.inventory import MovementType
from schemas.base import Payload


class StockMovementCreate(Payload):
    material_id: str = Field(..., min_length=1)
    type: MovementType
    quantity: int = Field(..., gt=0, le=INT_MAX)
    unit_price: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2)
    note: Optional[str] = None


__all__ = ["StockMovementCreate"]
