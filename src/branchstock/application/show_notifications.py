"""Application service: Show Expiration Notifications use case (query)."""

from __future__ import annotations

from branchstock.application.dto import NotificationDTO
from branchstock.domain.service.notification_deriver import NotificationDeriver


class ShowNotificationsHandler:

    def __init__(self, deriver: NotificationDeriver) -> None:
        self._deriver = deriver

    def handle(self) -> list[NotificationDTO]:
        return [
            NotificationDTO(
                batch_id=n.batch_id,
                batch_number=n.batch_number,
                product_id=n.product_id,
                product_name=n.product_name,
                product_brand=n.product_brand,
                expiration_date=n.expiration_date.isoformat(),
                days_until_expiration=n.days_until_expiration,
                quantity=n.quantity,
                allocated=n.allocated_quantity,
            )
            for n in self._deriver.expiring_notifications()
        ]
