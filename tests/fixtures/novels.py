"""
테스트용 Novel/Episode 픽스처 데이터
"""
from typing import Any

from models import EpisodeAccessType, EpisodeStatus, NovelStatus

DEFAULT_NOVEL_DATA: dict[str, Any] = {
    "title": "테스트 소설",
    "slug": "test-novel",
    "status": NovelStatus.PUBLISHED,
    "default_episode_price_coins": 30,
}

FREE_EPISODE_DATA: dict[str, Any] = {
    "title": "무료 에피소드",
    "access_type": EpisodeAccessType.FREE,
    "status": EpisodeStatus.PUBLISHED,
}

PAID_EPISODE_DATA: dict[str, Any] = {
    "title": "유료 에피소드",
    "access_type": EpisodeAccessType.PAID_UNLOCK,
    "status": EpisodeStatus.PUBLISHED,
}

DRAFT_FREE_EPISODE_DATA: dict[str, Any] = {
    "title": "미공개 무료 에피소드",
    "access_type": EpisodeAccessType.FREE,
    "status": EpisodeStatus.DRAFT,
}
