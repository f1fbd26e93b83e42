"""
데모 데이터 시딩 스크립트

작가, 코인을 가진 독자, 무료/유료/프로모션 에피소드가 있는 소설 하나를 만듭니다.
이미 있으면 건너뜁니다.

실행: python scripts/seed_demo_novel.py
"""
import asyncio
import logging
import os
import sys
from datetime import timedelta

# 프로젝트 루트를 sys.path에 추가
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from dotenv import load_dotenv
from tortoise import Tortoise

from models import (
    Episode,
    EpisodeAccessType,
    EpisodeStatus,
    Novel,
    NovelStatus,
    User,
    UserRole,
)
from service.gamification.wallet_service import WalletService
from utils.clock import utcnow

load_dotenv()

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

DATABASE_URL = os.getenv('DATABASE_URL') or "sqlite://db.sqlite3"

DEMO_SLUG = "the-whisper-of-maze"
READER_STARTING_COINS = 100

DEMO_EPISODES = [
    # (순서, 제목, 접근 방식, 가격, 프로모션 가격)
    (1, "미로의 입구", EpisodeAccessType.FREE, None, None),
    (2, "속삭이는 벽", EpisodeAccessType.FREE, None, None),
    (3, "잠긴 문", EpisodeAccessType.PAID_UNLOCK, None, None),
    (4, "두 번째 갈림길", EpisodeAccessType.PAID_UNLOCK, 40, 20),
    (5, "미로의 심장", EpisodeAccessType.PREMIUM_ACCESS, 50, None),
]


async def seed_demo_novel():
    """데모 소설 시딩"""
    await Tortoise.init(
        db_url=DATABASE_URL,
        modules={"models": ["models"]}
    )
    await Tortoise.generate_schemas(safe=True)

    try:
        if await Novel.exists(slug=DEMO_SLUG):
            logger.info(f"데모 소설이 이미 있습니다: {DEMO_SLUG}")
            return

        author, _ = await User.get_or_create(
            username="demo_author",
            defaults={"email": "author@novelmaze.local", "roles": [UserRole.WRITER.value]},
        )
        reader, _ = await User.get_or_create(
            username="demo_reader",
            defaults={"email": "reader@novelmaze.local", "roles": [UserRole.READER.value]},
        )

        novel = await Novel.create(
            title="속삭이는 미로",
            slug=DEMO_SLUG,
            author=author,
            status=NovelStatus.PUBLISHED,
            default_episode_price_coins=30,
        )

        now = utcnow()
        for order, title, access_type, price, promo_price in DEMO_EPISODES:
            await Episode.create(
                novel=novel,
                title=title,
                episode_order=order,
                access_type=access_type,
                status=EpisodeStatus.PUBLISHED,
                price_coins=price,
                promo_price_coins=promo_price,
                promo_starts_at=now - timedelta(days=1) if promo_price is not None else None,
                promo_ends_at=now + timedelta(days=7) if promo_price is not None else None,
            )

        balance = await WalletService.credit_coins(
            str(reader.id), READER_STARTING_COINS, reason="demo seed"
        )

        logger.info(
            f"데모 데이터 시딩 완료! novel={novel.id}, episodes={len(DEMO_EPISODES)}, "
            f"reader={reader.id} (coins={balance})"
        )
    finally:
        await Tortoise.close_connections()


if __name__ == "__main__":
    asyncio.run(seed_demo_novel())
