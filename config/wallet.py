"""지갑 및 구매 설정"""
from dataclasses import dataclass


@dataclass(frozen=True)
class PurchaseConfig:
    """에피소드 구매 설정"""

    CURRENCY: str = "COIN"
    """구매 통화"""

    READABLE_ID_PREFIX: str = "PUR-EP"
    """구매 번호 접두사"""

    READABLE_ID_RANDOM_LENGTH: int = 9
    """구매 번호 랜덤 접미사 길이"""


PURCHASE = PurchaseConfig()


@dataclass(frozen=True)
class CheckInConfig:
    """출석 체크 설정"""

    TIMEZONE: str = "Asia/Bangkok"
    """출석일 계산 기준 타임존"""

    STREAK_ACHIEVEMENT: str = "DAILY_STREAK"
    """출석 시 진행되는 업적 트랙"""


CHECK_IN = CheckInConfig()
