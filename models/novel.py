"""
소설 모델
"""
from enum import Enum

from tortoise import fields
from tortoise.models import Model


class NovelStatus(str, Enum):
    """소설 상태"""

    DRAFT = "draft"
    PUBLISHED = "published"
    COMPLETED = "completed"
    ON_HIATUS = "onHiatus"
    ARCHIVED = "archived"


class Novel(Model):
    """
    소설

    여러 에피소드로 구성되며, 판매 통계(수익/구매 수)를 누적합니다.
    """

    id = fields.UUIDField(pk=True)
    title = fields.CharField(max_length=200)
    slug = fields.CharField(max_length=200, unique=True)
    author = fields.ForeignKeyField("models.User", related_name="novels")
    co_authors = fields.ManyToManyField(
        "models.User",
        related_name="co_authored_novels",
        through="novel_co_author",
    )
    status = fields.CharEnumField(NovelStatus, default=NovelStatus.DRAFT)

    # 에피소드에 개별 가격이 없을 때 사용하는 기본 가격 (코인)
    default_episode_price_coins = fields.IntField(default=0)

    # 판매 통계
    total_revenue_coins = fields.BigIntField(default=0)
    purchases_count = fields.IntField(default=0)

    created_at = fields.DatetimeField(auto_now_add=True)

    class Meta:
        table = "novel"

    def __str__(self) -> str:
        return f"Novel(id={self.id}, title={self.title})"
