"""
에피소드 가격 계산 유닛 테스트
"""
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

import pytest

from models import Episode, EpisodeAccessType, EpisodeStatus

# 모델 인스턴스 생성을 위해 ORM 초기화가 필요함
pytestmark = [pytest.mark.asyncio, pytest.mark.usefixtures("test_db")]

NOW = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


def make_episode(**overrides) -> Episode:
    data = {
        "title": "테스트",
        "episode_order": 1,
        "access_type": EpisodeAccessType.PAID_UNLOCK,
        "status": EpisodeStatus.PUBLISHED,
    }
    data.update(overrides)
    return Episode(**data)


class TestOriginalPrice:
    async def test_own_price_wins(self):
        episode = make_episode(price_coins=40)
        assert await episode.get_original_price(novel=SimpleNamespace(default_episode_price_coins=30)) == 40

    async def test_falls_back_to_novel_default(self):
        episode = make_episode(price_coins=None)
        assert await episode.get_original_price(novel=SimpleNamespace(default_episode_price_coins=30)) == 30

    async def test_zero_when_no_price(self):
        episode = make_episode(price_coins=None)
        assert await episode.get_original_price(novel=SimpleNamespace(default_episode_price_coins=None)) == 0


class TestPromotion:
    async def test_active_window(self):
        episode = make_episode(
            promo_price_coins=20,
            promo_starts_at=NOW - timedelta(days=1),
            promo_ends_at=NOW + timedelta(days=1),
        )
        assert episode.is_promotion_active(40, NOW) is True

    async def test_not_started(self):
        episode = make_episode(promo_price_coins=20, promo_starts_at=NOW + timedelta(hours=1))
        assert episode.is_promotion_active(40, NOW) is False

    async def test_ended(self):
        episode = make_episode(promo_price_coins=20, promo_ends_at=NOW)
        assert episode.is_promotion_active(40, NOW) is False

    async def test_promo_not_cheaper(self):
        episode = make_episode(promo_price_coins=50)
        assert episode.is_promotion_active(40, NOW) is False

    async def test_naive_datetimes_treated_as_utc(self):
        episode = make_episode(
            promo_price_coins=10,
            promo_starts_at=datetime(2024, 4, 30),
            promo_ends_at=datetime(2024, 5, 2),
        )
        assert episode.is_promotion_active(40, NOW) is True

    async def test_effective_price_uses_promotion(self):
        episode = make_episode(price_coins=40, promo_price_coins=20)
        novel = SimpleNamespace(default_episode_price_coins=30)
        assert await episode.get_effective_price(novel=novel, now=NOW) == 20

    async def test_effective_price_without_promotion(self):
        episode = make_episode(price_coins=None)
        novel = SimpleNamespace(default_episode_price_coins=30)
        assert await episode.get_effective_price(novel=novel, now=NOW) == 30


class TestEpisodeFlags:
    async def test_free_and_published(self):
        episode = make_episode(access_type=EpisodeAccessType.FREE)
        assert episode.is_free is True
        assert episode.is_published is True

    async def test_draft_is_not_published(self):
        assert make_episode(status=EpisodeStatus.DRAFT).is_published is False
