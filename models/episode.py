"""
에피소드 모델
"""
from datetime import datetime
from enum import Enum
from typing import Optional

from tortoise import fields
from tortoise.models import Model

from utils.clock import ensure_aware, utcnow


class EpisodeAccessType(str, Enum):
    """에피소드 접근 방식"""

    FREE = "free"                        # 무료
    PAID_UNLOCK = "paid_unlock"          # 코인으로 개별 구매
    PREMIUM_ACCESS = "premium_access"    # 프리미엄 (코인 구매 가능)


class EpisodeStatus(str, Enum):
    """에피소드 공개 상태"""

    DRAFT = "draft"
    SCHEDULED = "scheduled"
    PUBLISHED = "published"
    ARCHIVED = "archived"


class Episode(Model):
    """
    에피소드

    소설에 속하며, 무료 또는 코인 구매 방식으로 열람합니다.
    가격은 에피소드 가격 → 소설 기본 가격 순서로 결정되고,
    프로모션 기간에는 할인 가격이 적용됩니다.
    """

    id = fields.UUIDField(pk=True)
    novel = fields.ForeignKeyField("models.Novel", related_name="episodes")
    title = fields.CharField(max_length=200)
    episode_order = fields.IntField(default=1)

    access_type = fields.CharEnumField(EpisodeAccessType, default=EpisodeAccessType.FREE)
    status = fields.CharEnumField(EpisodeStatus, default=EpisodeStatus.DRAFT)

    # 가격 (null이면 소설 기본 가격 사용)
    price_coins = fields.IntField(null=True)

    # 프로모션
    promo_price_coins = fields.IntField(null=True)
    promo_starts_at = fields.DatetimeField(null=True)
    promo_ends_at = fields.DatetimeField(null=True)

    # 통계
    purchases_count = fields.IntField(default=0)

    created_at = fields.DatetimeField(auto_now_add=True)

    class Meta:
        table = "episode"
        unique_together = ("novel", "episode_order")

    def __str__(self) -> str:
        return f"Episode(id={self.id}, order={self.episode_order}, title={self.title})"

    @property
    def is_free(self) -> bool:
        return self.access_type == EpisodeAccessType.FREE

    @property
    def is_published(self) -> bool:
        return self.status == EpisodeStatus.PUBLISHED

    def is_promotion_active(self, original_price: int, now: Optional[datetime] = None) -> bool:
        """프로모션 가격 적용 여부"""
        if self.promo_price_coins is None or self.promo_price_coins >= original_price:
            return False

        now = ensure_aware(now) or utcnow()
        starts_at = ensure_aware(self.promo_starts_at)
        ends_at = ensure_aware(self.promo_ends_at)

        if starts_at and now < starts_at:
            return False
        if ends_at and now >= ends_at:
            return False
        return True

    async def get_original_price(self, novel=None, using_db=None) -> int:
        """
        정가 (코인)

        Args:
            novel: 이미 조회한 소설 (없으면 조회)
            using_db: 트랜잭션 커넥션
        """
        if self.price_coins is not None:
            return max(0, self.price_coins)

        if novel is None:
            from models.novel import Novel
            novel = await Novel.get_or_none(id=self.novel_id, using_db=using_db)

        if novel is None:
            return 0
        return max(0, novel.default_episode_price_coins or 0)

    async def get_effective_price(
        self,
        novel=None,
        using_db=None,
        now: Optional[datetime] = None,
    ) -> int:
        """프로모션을 반영한 실제 구매 가격 (코인)"""
        original_price = await self.get_original_price(novel=novel, using_db=using_db)
        if self.is_promotion_active(original_price, now):
            return max(0, self.promo_price_coins)
        return original_price
