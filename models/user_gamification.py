"""
유저 게임화 모델
"""
from tortoise import fields
from tortoise.models import Model

from config import GAMIFICATION


class UserGamification(Model):
    """
    유저 게임화/지갑 상태

    유저당 하나의 행을 가지며 경험치, 레벨, 코인 지갑, 출석 연속 기록을 저장합니다.
    경험치/레벨 갱신은 하나의 트랜잭션에서 처리되며,
    이전 방식으로 기록되어 experience_points >= next_level_xp_threshold 인 행은
    조회 시 정규화(normalize)로 복구됩니다.
    """

    id = fields.IntField(pk=True)
    user = fields.OneToOneField(
        "models.User",
        related_name="gamification",
        on_delete=fields.CASCADE
    )

    # 경험치 / 레벨
    level = fields.IntField(default=GAMIFICATION.STARTING_LEVEL)
    experience_points = fields.IntField(default=0)                    # 현재 레벨 내 경험치
    total_experience_points_ever_earned = fields.BigIntField(default=0)
    next_level_xp_threshold = fields.IntField(default=GAMIFICATION.XP_PER_LEVEL)

    # 획득한 업적 아이템 ID 목록 (UserEarnedItem.id)
    achievements = fields.JSONField(default=list)

    # 지갑
    coin_balance = fields.BigIntField(default=0)
    last_coin_transaction_at = fields.DatetimeField(null=True)

    # 출석 연속 기록
    current_streak_days = fields.IntField(default=0)
    longest_streak_days = fields.IntField(default=0)
    last_check_in_at = fields.DatetimeField(null=True)

    last_activity_at = fields.DatetimeField(null=True)
    created_at = fields.DatetimeField(auto_now_add=True)
    updated_at = fields.DatetimeField(auto_now=True)

    class Meta:
        table = "user_gamification"
        indexes = (
            ("level", "experience_points"),    # 리더보드 조회 최적화
        )

    def __str__(self) -> str:
        return (
            f"UserGamification(user_id={self.user_id}, level={self.level}, "
            f"xp={self.experience_points}/{self.next_level_xp_threshold}, coins={self.coin_balance})"
        )

    @property
    def needs_normalization(self) -> bool:
        """현재 레벨 경험치가 임계값 이상인지 (정규화 필요)"""
        threshold = self.next_level_xp_threshold or GAMIFICATION.XP_PER_LEVEL
        return self.experience_points >= threshold

    @property
    def level_progress_percent(self) -> float:
        """다음 레벨까지 진행률 (0 ~ 100)"""
        if not self.next_level_xp_threshold or self.next_level_xp_threshold <= 0:
            return 0.0
        return max(0.0, min(100.0, self.experience_points / self.next_level_xp_threshold * 100))
