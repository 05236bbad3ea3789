# dao/inventory.py
from datetime import datetime
from typing import List, Optional
from sqlalchemy import case, update
from configs import db
from db.models.inventory import StockMovement, stock_delta
from db.models.material import Material
from utils.errors import NotFound


def bump_stock(material_id: str, delta: int, now: datetime) -> None:
    """Add delta to current_stock in a single UPDATE, flooring at zero."""
    new_stock = Material.current_stock + delta
    db.session.execute(
        update(Material)
        .where(Material.id == material_id)
        .values(
            current_stock=case((new_stock < 0, 0), else_=new_stock),
            updated_at=now,
        )
        .execution_options(synchronize_session=False)
    )


def add_movement(values: dict, now: datetime) -> StockMovement:
    """
    Stage one movement and apply it to the material's stock.
    Does not commit: callers own the transaction.
    """
    if db.session.get(Material, values["material_id"]) is None:
        raise NotFound("Material not found")
    mv = StockMovement(created_at=now, **values)
    db.session.add(mv)
    bump_stock(values["material_id"], stock_delta(mv.type, mv.quantity), now)
    return mv


def create_stock_movement(values: dict, now: datetime) -> StockMovement:
    try:
        mv = add_movement(values, now)
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise
    return mv


def list_stock_movements(material_id: Optional[str] = None) -> List[StockMovement]:
    q = StockMovement.query
    if material_id:
        q = q.filter(StockMovement.material_id == material_id)
    return q.order_by(StockMovement.created_at.desc()).all()
