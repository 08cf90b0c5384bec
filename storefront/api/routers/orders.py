# storefront/api/routers/orders.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from storefront.data.database import get_db
from storefront.domain.errors import ValidationFailed
from storefront.domain.schemas import OrderCreate, OrderOut
from storefront.services.order_service import OrderService

router = APIRouter(prefix="/orders", tags=["orders"])


def get_service(db: Session = Depends(get_db)) -> OrderService:
    return OrderService(db)


@router.post("", response_model=OrderOut, status_code=201)
def create_order(payload: OrderCreate, svc: OrderService = Depends(get_service)):
    """
    Stores the order exactly as checked out and queues the notification.
    """
    try:
        return svc.create_order(payload)
    except ValidationFailed as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("", response_model=List[OrderOut])
def list_orders(svc: OrderService = Depends(get_service)):
    return svc.list_orders()
