from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from pydantic import BaseModel

from app.db import get_db
from app.models import User, KitOrder, ORDER_STATUSES
from app.engine.kits import KIT_CATALOG, get_kit_info

router = APIRouter()


class KitResponse(BaseModel):
    name: str
    description: str
    rituals: List[str]
    archetypes: List[str]


class OrderCreate(BaseModel):
    user_id: str
    kit_name: str
    archetype: Optional[str] = None
    location: Optional[str] = None


class OrderStatusUpdate(BaseModel):
    status: str  # pending, in-progress, completed


class OrderResponse(BaseModel):
    id: str
    user_id: str
    user_name: str
    kit_name: str
    archetype: Optional[str]
    status: str
    location: str
    created_at: Optional[str]


@router.get("/kits", response_model=List[KitResponse])
def list_kits():
    """Kit catalog sorted by name, with descriptions and ritual steps."""
    kits = sorted(KIT_CATALOG.values(), key=lambda k: k.name)
    return [KitResponse(**k.to_dict()) for k in kits]


@router.get("/kits/{kit_name}", response_model=KitResponse)
def get_kit(kit_name: str):
    info = get_kit_info(kit_name)
    if info is None:
        raise HTTPException(status_code=404, detail="Kit not found")
    return KitResponse(**info.to_dict())


@router.post("/orders", response_model=OrderResponse)
def create_order(order_data: OrderCreate, db: Session = Depends(get_db)):
    """Place a kit order for a user. New orders start as pending."""
    user = db.query(User).filter(User.id == order_data.user_id).first()
    if not user:
        raise HTTPException(status_code=404, detail="User not found")

    info = get_kit_info(order_data.kit_name)
    if info is None:
        raise HTTPException(status_code=404, detail="Kit not found")

    order = KitOrder(
        user_id=user.id,
        kit_name=info.name,
        archetype=order_data.archetype,
        location=order_data.location,
        status="pending",
    )
    db.add(order)
    db.commit()
    db.refresh(order)

    return OrderResponse(**order.to_dict())


@router.get("/orders", response_model=List[OrderResponse])
def list_orders(status: Optional[str] = None, db: Session = Depends(get_db)):
    """All kit orders, newest first, optionally filtered by status."""
    query = db.query(KitOrder)
    if status is not None:
        if status not in ORDER_STATUSES:
            raise HTTPException(status_code=400, detail="Invalid status value")
        query = query.filter(KitOrder.status == status)

    orders = query.order_by(KitOrder.created_at.desc()).all()
    return [OrderResponse(**o.to_dict()) for o in orders]


@router.put("/orders/{order_id}/status", response_model=OrderResponse)
def update_order_status(
    order_id: str,
    status_data: OrderStatusUpdate,
    db: Session = Depends(get_db)
):
    """Move an order to pending, in-progress or completed."""
    if status_data.status not in ORDER_STATUSES:
        raise HTTPException(status_code=400, detail="Invalid status value")

    order = db.query(KitOrder).filter(KitOrder.id == order_id).first()
    if not order:
        raise HTTPException(status_code=404, detail="Order not found")

    order.status = status_data.status
    db.commit()
    db.refresh(order)

    return OrderResponse(**order.to_dict())
