"""
구매 모델
"""
from enum import Enum

from tortoise import fields
from tortoise.models import Model


class PurchaseStatus(str, Enum):
    """구매 상태"""

    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"
    REFUNDED = "refunded"


class PurchaseItemType(str, Enum):
    """구매 항목 종류"""

    NOVEL_EPISODE = "novel_episode"
    OFFICIAL_MEDIA = "official_media"


class Purchase(Model):
    """
    구매 기록

    완료 후에는 상태 전이 외에 수정하지 않습니다.
    """

    id = fields.UUIDField(pk=True)
    purchase_readable_id = fields.CharField(max_length=64, unique=True)
    user = fields.ForeignKeyField("models.User", related_name="purchases")

    status = fields.CharEnumField(PurchaseStatus, default=PurchaseStatus.PENDING)

    total_amount = fields.IntField(default=0)
    total_discount_amount = fields.IntField(default=0)
    final_amount = fields.IntField(default=0)
    currency = fields.CharField(max_length=16, default="COIN")

    metadata = fields.JSONField(null=True)
    # 예: {"novelId": "...", "novelTitle": "...", "episodeTitle": "...", "episodeOrder": 3}

    created_at = fields.DatetimeField(auto_now_add=True)
    completed_at = fields.DatetimeField(null=True)

    class Meta:
        table = "purchase"
        indexes = (
            ("user", "status"),
        )

    def __str__(self) -> str:
        return f"Purchase(id={self.purchase_readable_id}, status={self.status}, amount={self.final_amount})"


class PurchaseItem(Model):
    """구매 항목"""

    id = fields.IntField(pk=True)
    purchase = fields.ForeignKeyField(
        "models.Purchase",
        related_name="items",
        on_delete=fields.CASCADE
    )
    item_type = fields.CharEnumField(PurchaseItemType)
    item_id = fields.UUIDField()
    title = fields.CharField(max_length=200)
    description = fields.CharField(max_length=500, null=True)

    quantity = fields.IntField(default=1)
    unit_price = fields.IntField(default=0)
    discount_amount = fields.IntField(default=0)
    subtotal = fields.IntField(default=0)
    currency = fields.CharField(max_length=16, default="COIN")

    seller = fields.ForeignKeyField(
        "models.User",
        related_name="sold_items",
        null=True,
        on_delete=fields.SET_NULL
    )

    class Meta:
        table = "purchase_item"
