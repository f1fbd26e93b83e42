"""
알림 모델
"""

from enum import Enum
from tortoise import fields
from tortoise.models import Model


class NotificationType(str, Enum):
    """알림 타입"""

    ACHIEVEMENT_UNLOCKED = "achievement_unlocked"    # 업적 달성
    LEVEL_UP = "level_up"                            # 레벨업
    EPISODE_PURCHASED = "episode_purchased"          # 에피소드 구매


class NotificationChannel(str, Enum):
    """알림 채널"""

    IN_APP = "in_app"
    EMAIL = "email"


class Notification(Model):
    """
    인앱 알림

    업적 달성, 레벨업, 구매 완료 등을 유저에게 알립니다.
    """

    id = fields.IntField(pk=True)
    recipient = fields.ForeignKeyField("models.User", related_name="notifications")

    notification_type = fields.CharEnumField(NotificationType)
    channels = fields.JSONField(default=list)
    title = fields.CharField(max_length=200)
    message = fields.TextField(default="")

    # 부가 정보 (JSON)
    context = fields.JSONField(null=True)
    # 예: {"achievement_id": 3, "achievement_name": "첫 독서 I", "tier_level": 1}

    is_read = fields.BooleanField(default=False)
    created_at = fields.DatetimeField(auto_now_add=True)

    class Meta:
        table = "notification"
        indexes = (
            ("recipient", "is_read"),                # 미읽음 조회 최적화
            ("recipient", "created_at"),             # 최신순 조회 최적화
        )

    def __str__(self) -> str:
        return f"Notification(id={self.id}, recipient_id={self.recipient_id}, type={self.notification_type})"
