"""
알림 서비스

업적 달성, 레벨업, 에피소드 구매 등의 인앱 알림을 생성하고 조회합니다.
"""
import logging
import uuid
from typing import Any, Dict, List, Optional

from models.notification import Notification, NotificationChannel, NotificationType

logger = logging.getLogger(__name__)


class NotificationService:
    """알림 서비스"""

    @staticmethod
    async def create_notification(
        recipient_id: uuid.UUID,
        notification_type: NotificationType,
        title: str,
        message: str = "",
        context: Optional[Dict[str, Any]] = None,
        channels: Optional[List[NotificationChannel]] = None,
    ) -> Notification:
        """
        알림 생성

        Args:
            recipient_id: 받는 사람 유저 ID
            notification_type: 알림 타입
            title: 제목
            message: 내용
            context: 부가 정보 (JSON)
            channels: 발송 채널 (기본 인앱)

        Returns:
            생성된 알림
        """
        channels = channels or [NotificationChannel.IN_APP]

        notification = await Notification.create(
            recipient_id=recipient_id,
            notification_type=notification_type,
            channels=[channel.value for channel in channels],
            title=title,
            message=message,
            context=context,
        )

        logger.info(
            f"Notification created: recipient_id={recipient_id}, "
            f"type={notification_type.value}, title={title}"
        )
        return notification

    @staticmethod
    async def get_user_notifications(
        user_id: uuid.UUID,
        unread_only: bool = False,
        limit: int = 50,
        offset: int = 0
    ) -> List[Notification]:
        """
        유저 알림 목록 조회 (최신순)

        Args:
            user_id: 유저 ID
            unread_only: True이면 읽지 않은 알림만 조회
            limit: 조회 개수
            offset: 오프셋
        """
        query = Notification.filter(recipient_id=user_id)

        if unread_only:
            query = query.filter(is_read=False)

        return await query.order_by("-created_at").offset(offset).limit(limit).all()

    @staticmethod
    async def get_unread_count(user_id: uuid.UUID) -> int:
        """읽지 않은 알림 개수"""
        return await Notification.filter(recipient_id=user_id, is_read=False).count()

    @staticmethod
    async def mark_as_read(notification_id: int, user_id: uuid.UUID) -> Optional[Notification]:
        """
        알림 읽음 처리

        Returns:
            읽음 처리된 알림 (없으면 None)
        """
        notification = await Notification.get_or_none(id=notification_id, recipient_id=user_id)
        if not notification:
            return None

        if not notification.is_read:
            notification.is_read = True
            await notification.save()
            logger.debug(f"Notification read: id={notification_id}, user_id={user_id}")

        return notification
