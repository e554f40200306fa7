"""Domain service: Notification Deriver.

Read-only.  Works out which batches need an expiration warning today;
sending the warning is somebody else's job.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from branchstock.domain.clock import Clock
from branchstock.domain.model.batch import compute_state
from branchstock.domain.repository.batch_repository import BatchRepository
from branchstock.domain.repository.branch_stock_repository import BranchStockRepository
from branchstock.domain.repository.product_repository import ProductRepository


@dataclass(frozen=True)
class ExpiringNotification:

    batch_id: str
    batch_number: str
    product_id: str
    product_name: str
    product_brand: str
    expiration_date: date
    days_until_expiration: int
    quantity: int
    notification_enabled: bool
    allocated_quantity: int


class NotificationDeriver:

    def __init__(
        self,
        batch_repo: BatchRepository,
        stock_repo: BranchStockRepository,
        product_repo: ProductRepository,
        clock: Clock,
    ) -> None:
        self._batch_repo = batch_repo
        self._stock_repo = stock_repo
        self._product_repo = product_repo
        self._clock = clock

    def expiring_notifications(self, as_of: date | None = None) -> list[ExpiringNotification]:
        """One record per active, notification-enabled, expiring-soon batch.

        Expired batches are never included (days left is never negative).
        Ordered by days until expiration, then batch number.
        """
        as_of = as_of or self._clock.today()
        notifications: list[ExpiringNotification] = []

        for batch in self._batch_repo.list_all():
            if not batch.active or not batch.notification_enabled:
                continue
            state = compute_state(batch, as_of)
            if not state.expiring_soon:
                continue

            product = self._product_repo.get_by_id(batch.product_id)
            notifications.append(
                ExpiringNotification(
                    batch_id=batch.id,
                    batch_number=batch.batch_number,
                    product_id=batch.product_id,
                    product_name=product.name if product is not None else "",
                    product_brand=product.brand if product is not None else "",
                    expiration_date=batch.expiration_date,
                    days_until_expiration=state.days_until_expiration,
                    quantity=batch.quantity,
                    notification_enabled=batch.notification_enabled,
                    allocated_quantity=sum(
                        s.quantity for s in self._stock_repo.list_by_batch(batch.id)
                    ),
                )
            )

        notifications.sort(key=lambda n: (n.days_until_expiration, n.batch_number))
        return notifications
