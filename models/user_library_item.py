"""
유저 서재 모델
"""
from enum import Enum

from tortoise import fields
from tortoise.models import Model


class LibraryItemType(str, Enum):
    """서재 항목 종류"""

    NOVEL = "novel"


class LibraryItemStatus(str, Enum):
    """서재 항목 상태"""

    OWNED = "owned"
    READING = "reading"
    FINISHED_READING = "finished_reading"
    WISHLIST = "wishlist"


class UserLibraryItem(Model):
    """
    유저 서재 항목 (유저 x 소설)

    구매한 에피소드 목록과 소장/열람 상태를 저장합니다.
    """

    id = fields.IntField(pk=True)
    user = fields.ForeignKeyField("models.User", related_name="library_items")
    novel = fields.ForeignKeyField("models.Novel", related_name="library_items")
    item_type = fields.CharEnumField(LibraryItemType, default=LibraryItemType.NOVEL)

    statuses = fields.JSONField(default=list)
    purchased_episodes = fields.ManyToManyField(
        "models.Episode",
        related_name="owners",
        through="user_library_item_episode",
    )

    added_at = fields.DatetimeField(auto_now_add=True)
    first_acquired_at = fields.DatetimeField(null=True)

    class Meta:
        table = "user_library_item"
        unique_together = ("user", "novel", "item_type")

    def __str__(self) -> str:
        return f"UserLibraryItem(user_id={self.user_id}, novel_id={self.novel_id}, statuses={self.statuses})"

    @property
    def is_owned(self) -> bool:
        return LibraryItemStatus.OWNED.value in (self.statuses or [])

    def add_status(self, status: LibraryItemStatus) -> bool:
        """상태 추가 (이미 있으면 False)"""
        statuses = list(self.statuses or [])
        if status.value in statuses:
            return False
        statuses.append(status.value)
        self.statuses = statuses
        return True
