from models.users import User, UserRole, PRIVILEGED_ROLES
from models.novel import Novel, NovelStatus
from models.episode import Episode, EpisodeAccessType, EpisodeStatus
from models.user_gamification import UserGamification
from models.achievement import Achievement, AchievementCategory, AchievementRarity
from models.user_achievement import UserAchievement, UserEarnedItem, EarnedItemType
from models.purchase import Purchase, PurchaseItem, PurchaseStatus, PurchaseItemType
from models.user_library_item import UserLibraryItem, LibraryItemStatus, LibraryItemType
from models.notification import Notification, NotificationType, NotificationChannel

__models__ = [
    User,
    Novel,
    Episode,
    UserGamification,
    Achievement,
    UserAchievement,
    UserEarnedItem,
    Purchase,
    PurchaseItem,
    UserLibraryItem,
    Notification,
]
