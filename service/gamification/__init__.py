from service.gamification.gamification_listener import GamificationListener
from service.gamification.gamification_service import (
    AchievementProgressResult,
    AchievementSummary,
    CheckInResult,
    CheckInStatus,
    GamificationService,
    GamificationSummary,
)
from service.gamification.leveling import LevelUpResult, calculate_level_up
from service.gamification.wallet_service import WalletService

__all__ = [
    "GamificationListener",
    "GamificationService",
    "AchievementProgressResult",
    "AchievementSummary",
    "GamificationSummary",
    "CheckInResult",
    "CheckInStatus",
    "LevelUpResult",
    "calculate_level_up",
    "WalletService",
]
