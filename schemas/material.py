"""Schemas for material endpoints."""

from __future__ import annotations

from decimal import Decimal
from typing import Optional

from pydantic import Field

from db.models.base import INT_MAX
from schemas.base import Payload


class MaterialCreate(Payload):
    name: str = Field(..., min_length=1)
    code: str = Field(..., min_length=1, max_length=60)
    unit: str = Field(..., min_length=1, max_length=20)
    unit_price: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2)
    minimum_stock: int = Field(0, ge=0, le=INT_MAX)


class MaterialUpdate(Payload):
    name: Optional[str] = Field(None, min_length=1)
    code: Optional[str] = Field(None, min_length=1, max_length=60)
    unit: Optional[str] = Field(None, min_length=1, max_length=20)
    unit_price: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2)
    minimum_stock: Optional[int] = Field(None, ge=0, le=INT_MAX)

    def changes(self) -> dict:
        """Fields the client sent; only unit_price may be cleared with null."""
        data = self.model_dump(exclude_unset=True)
        return {k: v for k, v in data.items() if v is not None or k == "unit_price"}


__all__ = ["MaterialCreate", "MaterialUpdate"]
