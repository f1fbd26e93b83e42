"""
NovelMaze 설정 상수

모든 매직 넘버와 밸런스 관련 상수를 여기서 관리합니다.
각 도메인별 설정은 config/ 하위 모듈에 정의되어 있습니다.
"""
from config.gamification import GamificationConfig, GAMIFICATION, xp_required_for_level
from config.wallet import PurchaseConfig, PURCHASE, CheckInConfig, CHECK_IN

__all__ = [
    # gamification
    "GamificationConfig", "GAMIFICATION", "xp_required_for_level",
    # wallet & purchase
    "PurchaseConfig", "PURCHASE",
    "CheckInConfig", "CHECK_IN",
]
