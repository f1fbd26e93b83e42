"""
업적 데이터 시딩 스크립트

티어 업적 카탈로그를 (tier_key, tier_level) 기준으로 upsert 합니다.
여러 번 실행해도 같은 결과가 됩니다.

실행: python scripts/seed_achievements.py
"""
import asyncio
import logging
import os
import sys

# 프로젝트 루트를 sys.path에 추가
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from dotenv import load_dotenv
from tortoise import Tortoise

from models.achievement import Achievement
from service.gamification.achievement_catalog import TIER_PLANS, build_catalog

load_dotenv()

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

DATABASE_URL = os.getenv('DATABASE_URL') or "sqlite://db.sqlite3"


async def upsert_catalog() -> int:
    """카탈로그 upsert (생성된 행 수 반환)"""
    created_count = 0

    for row in build_catalog():
        tier_key = row.pop("tier_key")
        tier_level = row.pop("tier_level")
        # 자동 생성된 행(FIRST_READER_TIER_1_AUTO)도 같은 티어로 덮어씀
        _, created = await Achievement.update_or_create(
            defaults=row, tier_key=tier_key, tier_level=tier_level
        )
        if created:
            created_count += 1

    return created_count


async def seed_achievements():
    """업적 데이터 시딩"""
    await Tortoise.init(
        db_url=DATABASE_URL,
        modules={"models": ["models"]}
    )
    await Tortoise.generate_schemas(safe=True)

    logger.info("업적 데이터 시딩 시작...")

    try:
        created_count = await upsert_catalog()
        total = await Achievement.all().count()
        logger.info(
            f"업적 데이터 시딩 완료! 트랙 {len(TIER_PLANS)}개, "
            f"신규 {created_count}개, 전체 {total}개"
        )
    finally:
        await Tortoise.close_connections()


if __name__ == "__main__":
    asyncio.run(seed_achievements())
