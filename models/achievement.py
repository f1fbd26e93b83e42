"""
업적 모델
"""

from enum import Enum
from tortoise import fields
from tortoise.models import Model


class AchievementCategory(str, Enum):
    """업적 카테고리"""

    READING = "Reading"                    # 읽기 업적
    ENGAGEMENT = "Engagement"              # 참여 업적
    USER_PROGRESSION = "UserProgression"   # 성장 업적
    COLLECTION = "Collection"              # 수집 업적


class AchievementRarity(str, Enum):
    """업적 희귀도"""

    COMMON = "Common"
    UNCOMMON = "Uncommon"
    RARE = "Rare"
    EPIC = "Epic"
    LEGENDARY = "Legendary"


class Achievement(Model):
    """
    업적 마스터 데이터

    하나의 업적 트랙(tier_key)은 여러 티어로 구성되며, 각 티어가 한 행입니다.
    """

    id = fields.IntField(pk=True)
    achievement_code = fields.CharField(max_length=100, unique=True)   # "FIRST_READER_TIER_1"
    title = fields.CharField(max_length=200)
    description = fields.TextField()
    category = fields.CharEnumField(AchievementCategory)
    rarity = fields.CharEnumField(AchievementRarity, default=AchievementRarity.COMMON)

    # 티어
    tier_key = fields.CharField(max_length=100, index=True)           # "FIRST_READER"
    tier_level = fields.IntField(default=1)
    max_tier = fields.IntField(default=1)

    # 달성 조건 (JSON)
    unlock_conditions = fields.JSONField(default=list)
    # 예: [{"event_name": "USER_READ_EPISODE", "target_value": 5}]

    # 보상 경험치
    points = fields.IntField(default=0)

    display_order = fields.IntField(default=0)
    is_active = fields.BooleanField(default=True)
    is_secret = fields.BooleanField(default=False)

    class Meta:
        table = "achievement"
        unique_together = ("tier_key", "tier_level")

    def __str__(self) -> str:
        return f"Achievement(code={self.achievement_code}, tier={self.tier_level}/{self.max_tier})"

    @property
    def target_value(self) -> int:
        """첫 번째 달성 조건의 목표값 (없으면 1)"""
        if self.unlock_conditions:
            target = self.unlock_conditions[0].get("target_value")
            if target:
                return int(target)
        return 1
