import logging
import threading
from typing import Callable, Dict

from storefront.repositories.order_repo import OrderRepository
from storefront.schemas.order_schema import OrderStatus
from storefront.store.base import Store
from storefront.utils.dates import as_utc, utcnow

log = logging.getLogger("admin")


class AdminNotificationMonitor:
    """
    Counts orders placed since the admin last looked, plus orders still
    pending. Refreshed by the scheduler and on demand.
    """

    def __init__(self, clock: Callable = utcnow):
        self.clock = clock
        self.last_checked = clock()
        self.new_orders = 0
        self.pending_orders = 0
        self._lock = threading.Lock()

    def refresh(self, store: Store) -> Dict:
        orders = OrderRepository(store).list()
        with self._lock:
            since = self.last_checked
            self.new_orders = sum(1 for o in orders if as_utc(o.created_at) > since)
            self.pending_orders = sum(1 for o in orders if o.status == OrderStatus.PENDING)
        log.debug("admin notifications: new=%d pending=%d", self.new_orders, self.pending_orders)
        return self.snapshot()

    def mark_checked(self) -> Dict:
        with self._lock:
            self.last_checked = self.clock()
            self.new_orders = 0
        return self.snapshot()

    def snapshot(self) -> Dict:
        return {
            "new_orders": self.new_orders,
            "pending_orders": self.pending_orders,
            "total_notifications": self.new_orders + self.pending_orders,
            "last_checked": self.last_checked.isoformat(),
        }
