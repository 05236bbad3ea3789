from datetime import datetime
from typing import Optional
from sqlalchemy import func, select
from configs import db
from db.models.inventory import StockMovement
from db.models.requisition import Requisition
from dao import material as material_dao


def _count(model, start: Optional[datetime], end: Optional[datetime]) -> int:
    stmt = select(func.count()).select_from(model)
    if start is not None:
        stmt = stmt.where(model.created_at >= start)
    if end is not None:
        stmt = stmt.where(model.created_at <= end)
    return int(db.session.execute(stmt).scalar() or 0)


def get_dashboard_stats(
    start: Optional[datetime] = None, end: Optional[datetime] = None
) -> dict:
    low = material_dao.list_low_stock_materials()
    return {
        "totalRequisitions": _count(Requisition, start, end),
        "totalMovements": _count(StockMovement, start, end),
        "lowStockItems": len(low),
        "criticalStockItems": sum(1 for m in low if m.current_stock == 0),
    }
