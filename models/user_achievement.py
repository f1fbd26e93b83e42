"""
유저 업적 모델
"""

from enum import Enum

from tortoise import fields
from tortoise.models import Model


class EarnedItemType(str, Enum):
    """획득 아이템 종류"""

    ACHIEVEMENT = "Achievement"
    BADGE = "Badge"


class UserAchievement(Model):
    """
    유저 업적 문서

    유저당 하나이며, 트랙별 진행 상태는 UserEarnedItem에 저장됩니다.
    """

    id = fields.IntField(pk=True)
    user = fields.OneToOneField(
        "models.User",
        related_name="achievement_record",
        on_delete=fields.CASCADE
    )
    created_at = fields.DatetimeField(auto_now_add=True)
    updated_at = fields.DatetimeField(auto_now=True)

    class Meta:
        table = "user_achievement"

    def __str__(self) -> str:
        return f"UserAchievement(user_id={self.user_id})"


class UserEarnedItem(Model):
    """
    업적 트랙별 진행 상태

    achievement는 현재 티어의 정의를 가리키며,
    progress_current >= progress_target 이 되면 다음 티어로 넘어갑니다.
    """

    id = fields.IntField(pk=True)
    user_achievement = fields.ForeignKeyField(
        "models.UserAchievement",
        related_name="earned_items",
        on_delete=fields.CASCADE
    )
    item_code = fields.CharField(max_length=100)                     # 업적 tier_key
    item_type = fields.CharEnumField(EarnedItemType, default=EarnedItemType.ACHIEVEMENT)
    achievement = fields.ForeignKeyField(
        "models.Achievement",
        related_name="earned_by",
        null=True,
        on_delete=fields.SET_NULL
    )

    progress_current = fields.IntField(default=0)
    progress_target = fields.IntField(default=1)
    progress_tier = fields.IntField(default=1)

    earned_at = fields.DatetimeField(auto_now_add=True)

    class Meta:
        table = "user_earned_item"
        unique_together = ("user_achievement", "item_code")

    def __str__(self) -> str:
        return (
            f"UserEarnedItem(code={self.item_code}, tier={self.progress_tier}, "
            f"progress={self.progress_current}/{self.progress_target})"
        )

    @property
    def progress(self) -> dict:
        return {
            "current": self.progress_current,
            "target": self.progress_target,
            "tier": self.progress_tier,
        }

    @property
    def progress_percent(self) -> float:
        """진행률 (0.0 ~ 1.0)"""
        if self.progress_target == 0:
            return 1.0
        return min(1.0, self.progress_current / self.progress_target)
