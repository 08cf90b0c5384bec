# storefront/services/notification_service.py
from kombu.exceptions import OperationalError

from storefront.celery_worker import celery_app
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class NotificationService:
    """
    Sends notifications through Celery so the request never waits on them.
    """

    @staticmethod
    def send_order_notification(order_id: int, total: str):
        """
        Queues the "order placed" notification. The order is already
        committed at this point, so a broker outage is logged and not raised.
        """
        try:
            send_order_notification_task.delay(order_id, total)
        except OperationalError as e:
            logger.warning(f"Could not queue notification for order {order_id}: {e}")


@celery_app.task(name="storefront.services.notification_service.send_order_notification_task")
def send_order_notification_task(order_id: int, total: str):
    """
    Celery task. Only logs for now.
    """
    logger.info(f"[NOTIFICATION] Order {order_id} placed, total {total}")

    return {"order_id": order_id, "status": "sent"}
