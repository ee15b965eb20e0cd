"""
Notify Admin Service

Records admin notifications (out of stock, low inventory, ...) and forwards them
to Slack when a notifier is configured.
"""

import logging
from typing import List

from pharmassist.integrations.contracts.pharmacy import AdminNotification, make_reference

logger = logging.getLogger(__name__)


class NotifyAdminService:
    def __init__(self, notifier=None):
        # notifier is anything with send(AdminNotification), e.g. SlackAdminNotifier
        self.notifier = notifier
        self._notifications: List[AdminNotification] = []

    def notify(self, notification: AdminNotification) -> str:
        notification.reference = make_reference("NOTIFY")
        logger.info(
            "Notification %s: %s for %s (Priority: %s)",
            notification.reference,
            notification.reason,
            notification.name,
            notification.priority.value,
        )
        self._notifications.append(notification)
        if self.notifier:
            self.notifier.send(notification)
            notification.delivered = True
        else:
            logger.warning("No notifier configured. Notification %s recorded locally only.", notification.reference)
        return notification.reference

    def get_notifications(self) -> List[AdminNotification]:
        return list(self._notifications)
