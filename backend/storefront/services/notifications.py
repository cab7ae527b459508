import logging
from typing import Optional

from storefront.adapters.notifier import Notifier
from storefront.config import settings

log = logging.getLogger("notifications")


def send_order_status_email(
    notifier: Notifier,
    customer_email: str,
    customer_name: str,
    order_number: str,
    status: str,
    message: Optional[str] = None,
) -> bool:
    """Best-effort customer email. Failures are logged, never raised."""
    params = {
        "to_name": customer_name,
        "order_number": order_number,
        "status": status,
        "message": message
        or f"Your order {order_number} status has been updated to {status}.",
    }
    try:
        return bool(
            notifier.send(settings.EMAILJS_TEMPLATE_ID_BUYER, customer_email, params)
        )
    except Exception:
        log.warning("Email sending failed for order %s", order_number, exc_info=True)
        return False


def send_admin_notification(
    notifier: Notifier, order_number: str, customer_name: str, total: float
) -> bool:
    """Best-effort new-order alert to the shop admin."""
    params = {
        "to_name": "Admin",
        "order_number": order_number,
        "customer_name": customer_name,
        "total": total,
        "message": f"New order {order_number} received from {customer_name} for {total:.2f}",
    }
    try:
        return bool(
            notifier.send(settings.EMAILJS_TEMPLATE_ID_ADMIN, settings.ADMIN_EMAIL, params)
        )
    except Exception:
        log.warning("Admin notification failed for order %s", order_number, exc_info=True)
        return False
