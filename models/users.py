from enum import Enum

from tortoise import models, fields


class UserRole(str, Enum):
    READER = "Reader"
    WRITER = "Writer"
    ADMIN = "Admin"
    MODERATOR = "Moderator"


PRIVILEGED_ROLES = (UserRole.ADMIN.value, UserRole.MODERATOR.value)


class User(models.Model):
    id = fields.UUIDField(pk=True)
    username = fields.CharField(max_length=64, unique=True)
    email = fields.CharField(max_length=255, null=True)
    roles = fields.JSONField(default=list)
    created_at = fields.DatetimeField(auto_now_add=True)

    def has_any_role(self, *roles: str) -> bool:
        return any(role in (self.roles or []) for role in roles)

    @property
    def is_privileged(self) -> bool:
        """Admin/Moderator 여부"""
        return self.has_any_role(*PRIVILEGED_ROLES)

    def __str__(self) -> str:
        return f"User(id={self.id}, username={self.username})"

    class Meta:
        table = "users"
