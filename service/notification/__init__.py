"""인앱 알림 시스템"""

from service.notification.notification_service import NotificationService

__all__ = [
    "NotificationService",
]
