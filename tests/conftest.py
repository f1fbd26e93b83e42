"""
pytest 설정 및 공통 픽스처 정의
"""
import sys
from pathlib import Path
from typing import AsyncGenerator
from unittest.mock import AsyncMock, MagicMock

import pytest

# 프로젝트 루트를 Python 경로에 추가
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from tests.fixtures.novels import DEFAULT_NOVEL_DATA, PAID_EPISODE_DATA  # noqa: E402
from tests.fixtures.users import AUTHOR_DATA, DEFAULT_USER_DATA  # noqa: E402


# =============================================================================
# pytest 설정
# =============================================================================


def pytest_configure(config):
    """pytest 설정"""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )


# =============================================================================
# 데이터베이스 픽스처
# =============================================================================


@pytest.fixture(scope="function")
async def test_db() -> AsyncGenerator[None, None]:
    """
    테스트용 인메모리 SQLite 데이터베이스
    각 테스트 함수마다 새로운 DB 생성
    """
    from tortoise import Tortoise

    await Tortoise.init(
        db_url="sqlite://:memory:",
        modules={"models": ["models"]}
    )
    await Tortoise.generate_schemas()

    yield

    await Tortoise.close_connections()


# =============================================================================
# Mock 픽스처
# =============================================================================


@pytest.fixture
def mock_notification_service() -> MagicMock:
    """알림 생성만 기록하는 Mock 알림 서비스"""
    service = MagicMock()
    service.create_notification = AsyncMock()
    return service


# =============================================================================
# 엔티티 팩토리 픽스처 (DB 저장)
# =============================================================================


@pytest.fixture
def user_factory(test_db):
    """테스트용 User 생성 팩토리"""
    from models import User

    counter = {"n": 0}

    async def _create_user(**overrides) -> User:
        counter["n"] += 1
        data = {**DEFAULT_USER_DATA, "username": f"{DEFAULT_USER_DATA['username']}{counter['n']}"}
        data.update(overrides)
        return await User.create(**data)

    return _create_user


@pytest.fixture
def novel_factory(test_db, user_factory):
    """테스트용 Novel 생성 팩토리 (작가 없으면 생성)"""
    from models import Novel

    counter = {"n": 0}

    async def _create_novel(author=None, **overrides) -> Novel:
        counter["n"] += 1
        if author is None:
            author = await user_factory(**{**AUTHOR_DATA, "username": f"author{counter['n']}"})
        data = {**DEFAULT_NOVEL_DATA, "slug": f"{DEFAULT_NOVEL_DATA['slug']}-{counter['n']}"}
        data.update(overrides)
        return await Novel.create(author=author, **data)

    return _create_novel


@pytest.fixture
def episode_factory(test_db):
    """테스트용 Episode 생성 팩토리"""
    from models import Episode

    counter = {"n": 0}

    async def _create_episode(novel, **overrides) -> Episode:
        counter["n"] += 1
        data = {**PAID_EPISODE_DATA, "episode_order": counter["n"]}
        data.update(overrides)
        return await Episode.create(novel=novel, **data)

    return _create_episode


@pytest.fixture
async def reader(user_factory):
    """기본 독자"""
    return await user_factory()


@pytest.fixture
async def novel(novel_factory):
    """기본 소설 (기본 가격 30 코인)"""
    return await novel_factory()


@pytest.fixture
async def paid_episode(episode_factory, novel):
    """기본 유료 에피소드 (소설 기본 가격 사용)"""
    return await episode_factory(novel)


# =============================================================================
# 서비스 픽스처
# =============================================================================


@pytest.fixture
def gamification_service(mock_notification_service):
    from service.gamification import GamificationService
    return GamificationService(notification_service=mock_notification_service)


@pytest.fixture
def purchase_service(mock_notification_service):
    from service.episode import PurchaseService
    return PurchaseService(notification_service=mock_notification_service)
