# storefront/services/order_service.py
from decimal import Decimal
from typing import Any, Dict, List

from sqlalchemy.orm import Session

from storefront.data.models.order import OrderModel
from storefront.domain.errors import ValidationFailed
from storefront.domain.schemas import OrderCreate
from storefront.repos.order_repo import OrderRepo
from storefront.services.notification_service import NotificationService
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

CENT = Decimal("0.01")


class OrderService:
    """
    Orders are immutable snapshots of what the client checked out.
    Separate from CartService: placing an order does not touch the cart.
    """

    def __init__(self, db: Session, notifications: NotificationService | None = None):
        self.repo = OrderRepo(db)
        self.notification_service = notifications or NotificationService()

    def create_order(self, payload: OrderCreate) -> Dict[str, Any]:
        """
        Use Case: placing an order.

        1. Checks the submitted totals add up (there is no catalogue to
           reprice against, so the figures are only checked for consistency)
        2. Stores the snapshot
        3. Queues the notification
        """
        self._check_totals(payload)

        order = OrderModel(
            items=[
                {
                    "id": i.id,
                    "title": i.title,
                    "price": float(i.price),
                    "img": i.img,
                    "quantity": i.quantity,
                }
                for i in payload.items
            ],
            subtotal=payload.subtotal.quantize(CENT),
            tax=payload.tax.quantize(CENT),
            total=payload.total.quantize(CENT),
        )

        created = self.repo.create_order(order)

        logger.info(f"Order {created.id} created, total {created.total}")

        self.notification_service.send_order_notification(created.id, str(created.total))

        return self._to_dict(created)

    def list_orders(self) -> List[Dict[str, Any]]:
        """
        Use Case: all orders, newest first (Query).
        """
        return [self._to_dict(o) for o in self.repo.list_orders()]

    @staticmethod
    def _check_totals(payload: OrderCreate):
        subtotal = sum((i.price * i.quantity for i in payload.items), Decimal("0.00"))

        if subtotal.quantize(CENT) != payload.subtotal.quantize(CENT):
            raise ValidationFailed(
                f"Subtotal {payload.subtotal} does not match items ({subtotal.quantize(CENT)})"
            )

        if (payload.subtotal + payload.tax).quantize(CENT) != payload.total.quantize(CENT):
            raise ValidationFailed("Total must equal subtotal plus tax")

    @staticmethod
    def _to_dict(order: OrderModel) -> Dict[str, Any]:
        return {
            "id": order.id,
            "items": order.items,
            "subtotal": order.subtotal,
            "tax": order.tax,
            "total": order.total,
            "createdAt": order.created_at,
        }
