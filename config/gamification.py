"""게임화(XP/레벨/업적) 설정"""
from dataclasses import dataclass


@dataclass(frozen=True)
class GamificationConfig:
    """경험치 및 레벨 설정"""

    XP_PER_LEVEL: int = 100
    """레벨당 필요 경험치 (모든 레벨 계산의 단일 기준값)"""

    STARTING_LEVEL: int = 1
    """신규 유저 시작 레벨"""

    STORY_COMPLETED_XP: int = 10
    """스토리 완독 시 지급 경험치"""

    LOGIN_XP: int = 1
    """로그인 시 지급 경험치"""

    STORY_COMPLETED_ACHIEVEMENT: str = "FIRST_STORY_COMPLETED"
    """스토리 완독 시 진행되는 업적 트랙"""

    AUTO_SEED_TIER_KEY: str = "FIRST_READER"
    """카탈로그에 없을 때 자동 생성하는 업적 트랙"""

    AUTO_SEED_POINTS: int = 10
    """자동 생성 업적의 보상 경험치"""


GAMIFICATION = GamificationConfig()


def xp_required_for_level(level: int) -> int:
    """
    해당 레벨에서 다음 레벨로 올라가기 위해 필요한 경험치

    현재는 모든 레벨이 동일한 비용을 가집니다.
    곡선을 바꾸려면 이 함수만 수정하면 됩니다.
    """
    return GAMIFICATION.XP_PER_LEVEL
