"""
테스트용 User 픽스처 데이터
"""
from typing import Any

# 기본 테스트 유저 데이터
DEFAULT_USER_DATA: dict[str, Any] = {
    "username": "reader",
    "email": "reader@test.local",
    "roles": ["Reader"],
}

AUTHOR_DATA: dict[str, Any] = {
    "username": "author",
    "email": "author@test.local",
    "roles": ["Writer"],
}

ADMIN_DATA: dict[str, Any] = {
    "username": "admin",
    "email": "admin@test.local",
    "roles": ["Admin"],
}

MODERATOR_DATA: dict[str, Any] = {
    "username": "moderator",
    "email": "moderator@test.local",
    "roles": ["Reader", "Moderator"],
}
