"""
게임화 서비스

경험치 지급, 레벨업, 티어 업적 진행, 출석 체크, 요약 조회를 담당합니다.
경험치 증가와 레벨 정산은 하나의 트랜잭션에서 처리됩니다.
"""
import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional

from tortoise.expressions import F
from tortoise.transactions import in_transaction

from config import CHECK_IN, GAMIFICATION
from exceptions import UserNotFoundError
from models import (
    Achievement,
    AchievementCategory,
    AchievementRarity,
    EarnedItemType,
    NotificationType,
    User,
    UserAchievement,
    UserEarnedItem,
    UserGamification,
)
from service.gamification.leveling import LevelUpResult, build_level_up_result
from service.notification import NotificationService
from utils.clock import ensure_aware, local_day, utcnow
from utils.ids import parse_id

logger = logging.getLogger(__name__)


# =============================================================================
# 결과 데이터
# =============================================================================


@dataclass
class AchievementProgressResult:
    """업적 진행 결과"""
    unlocked: bool
    unlocked_tier_level: Optional[int] = None
    unlocked_title: Optional[str] = None
    max_tier_reached: bool = False
    error: Optional[str] = None


@dataclass
class AchievementSummary:
    id: int
    title: str
    description: str
    progress: Dict[str, int]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "_id": self.id,
            "title": self.title,
            "description": self.description,
            "progress": self.progress,
        }


@dataclass
class GamificationSummary:
    """게임화 요약 (프로필 화면용)"""
    experience_points: int
    level: int
    next_level_xp_threshold: int
    total_experience_points_ever_earned: int
    achievements: List[AchievementSummary] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "experiencePoints": self.experience_points,
            "level": self.level,
            "achievements": [achievement.to_dict() for achievement in self.achievements],
        }


@dataclass
class CheckInResult:
    """출석 체크 결과"""
    checked_in: bool
    already_checked_in: bool
    current_streak_days: int
    longest_streak_days: int
    achievement: Optional[AchievementProgressResult] = None


@dataclass
class CheckInStatus:
    """출석 상태"""
    checked_in_today: bool
    current_streak_days: int
    longest_streak_days: int
    last_check_in_at: Optional[datetime]


# =============================================================================
# 서비스
# =============================================================================


class GamificationService:
    """
    게임화 서비스

    알림 서비스를 주입받아 레벨업/업적 달성 알림을 생성합니다.
    알림 생성 실패는 로그만 남기고 본 작업에는 영향을 주지 않습니다.
    """

    def __init__(self, notification_service: Any = NotificationService):
        self.notification_service = notification_service

    # -------------------------------------------------------------------------
    # 게임화 행
    # -------------------------------------------------------------------------

    @staticmethod
    async def _get_or_create_record(user_id: uuid.UUID, using_db=None) -> UserGamification:
        if not await User.exists(id=user_id, using_db=using_db):
            raise UserNotFoundError(user_id)

        record, created = await UserGamification.get_or_create(user_id=user_id, using_db=using_db)
        if created:
            logger.info(f"Gamification record created: user_id={user_id}")
        return record

    async def find_or_create_gamification(self, user_id: str) -> UserGamification:
        """
        유저 게임화 행 조회 (없으면 생성)

        Raises:
            InvalidIdError: 잘못된 유저 ID
            UserNotFoundError: 유저 없음
        """
        return await self._get_or_create_record(parse_id(user_id, "user_id"))

    # -------------------------------------------------------------------------
    # 경험치 / 레벨
    # -------------------------------------------------------------------------

    async def award_points(self, user_id: str, points: int) -> Optional[LevelUpResult]:
        """
        경험치 지급

        하나의 트랜잭션에서 경험치를 원자적으로 증가시키고 레벨업을 정산합니다.

        Args:
            user_id: 유저 ID
            points: 지급할 경험치 (0 이하면 아무것도 하지 않음)

        Returns:
            레벨 정산 결과 (points <= 0 이면 None)

        Raises:
            InvalidIdError: 잘못된 유저 ID
            UserNotFoundError: 유저 없음
        """
        if points <= 0:
            return None

        user_uuid = parse_id(user_id, "user_id")

        async with in_transaction() as conn:
            record = await self._get_or_create_record(user_uuid, using_db=conn)

            await UserGamification.filter(id=record.id).using_db(conn).update(
                experience_points=F("experience_points") + points,
                total_experience_points_ever_earned=F("total_experience_points_ever_earned") + points,
            )
            await record.refresh_from_db(using_db=conn)

            result = build_level_up_result(record.level, record.experience_points)
            record.level = result.new_level
            record.experience_points = result.experience_points
            record.next_level_xp_threshold = result.next_level_xp_threshold
            record.last_activity_at = utcnow()
            await record.save(
                using_db=conn,
                update_fields=[
                    "level", "experience_points", "next_level_xp_threshold",
                    "last_activity_at", "updated_at",
                ],
            )

        logger.info(
            f"XP awarded: user_id={user_uuid}, points={points}, "
            f"level={result.new_level}, xp={result.experience_points}/{result.next_level_xp_threshold}"
        )

        if result.leveled_up:
            logger.info(
                f"Level up: user_id={user_uuid}, {result.old_level} -> {result.new_level}"
            )
            await self._notify(
                user_uuid,
                NotificationType.LEVEL_UP,
                title=f"레벨 {result.new_level} 달성!",
                message=f"레벨이 {result.old_level}에서 {result.new_level}(으)로 올랐습니다.",
                context={"oldLevel": result.old_level, "newLevel": result.new_level},
            )

        return result

    async def normalize_level_if_needed(self, user_id: str) -> bool:
        """
        레벨 정규화

        이전 방식으로 기록되어 경험치가 임계값 이상 남아 있는 행을
        같은 레벨 곡선으로 다시 정산합니다.

        Returns:
            변경 여부
        """
        user_uuid = parse_id(user_id, "user_id")

        async with in_transaction() as conn:
            record = await UserGamification.get_or_none(user_id=user_uuid, using_db=conn)
            if not record or not record.needs_normalization:
                return False

            result = build_level_up_result(record.level, record.experience_points)
            threshold_changed = record.next_level_xp_threshold != result.next_level_xp_threshold
            if not result.leveled_up and not threshold_changed:
                return False

            record.level = result.new_level
            record.experience_points = result.experience_points
            record.next_level_xp_threshold = result.next_level_xp_threshold
            await record.save(
                using_db=conn,
                update_fields=["level", "experience_points", "next_level_xp_threshold", "updated_at"],
            )

        logger.info(
            f"Level normalized: user_id={user_uuid}, {result.old_level} -> {result.new_level}, "
            f"xp={result.experience_points}"
        )
        return True

    # -------------------------------------------------------------------------
    # 업적
    # -------------------------------------------------------------------------

    async def _auto_seed_achievement(self, tier_key: str) -> Achievement:
        """카탈로그에 없는 기본 업적 트랙을 1단계짜리로 생성"""
        achievement = await Achievement.create(
            achievement_code=f"{tier_key}_TIER_1_AUTO",
            title="독서의 첫걸음 I",
            description="첫 번째 에피소드를 읽었습니다.",
            category=AchievementCategory.READING,
            rarity=AchievementRarity.COMMON,
            tier_key=tier_key,
            tier_level=1,
            max_tier=1,
            unlock_conditions=[{"event_name": tier_key, "target_value": 1}],
            points=GAMIFICATION.AUTO_SEED_POINTS,
        )
        logger.warning(f"Achievement auto-seeded: tier_key={tier_key}")
        return achievement

    async def track_achievement_progress(
        self,
        user_id: str,
        tier_key: str,
        increment: int = 1,
    ) -> AchievementProgressResult:
        """
        티어 업적 진행

        증가량을 더한 뒤 목표를 넘을 때마다 티어를 달성 처리하고 다음 티어로 넘어갑니다.
        더 올라갈 티어가 없다면(최고 티어 또는 다음 티어 정의 없음) 진행량은 버려집니다.
        예외는 밖으로 던지지 않고 결과의 error로 돌려줍니다.

        Args:
            user_id: 유저 ID
            tier_key: 업적 트랙 키 (예: "FIRST_READER")
            increment: 진행 증가량 (0 이하면 아무것도 하지 않음)

        Returns:
            업적 진행 결과
        """
        if increment <= 0:
            return AchievementProgressResult(unlocked=False)

        try:
            user_uuid = parse_id(user_id, "user_id")

            master = await Achievement.filter(tier_key=tier_key).order_by("tier_level").first()
            if not master:
                if tier_key != GAMIFICATION.AUTO_SEED_TIER_KEY:
                    logger.error(f"Achievement tier not found: tier_key={tier_key}")
                    return AchievementProgressResult(unlocked=False)
                master = await self._auto_seed_achievement(tier_key)

            if not await User.exists(id=user_uuid):
                raise UserNotFoundError(user_uuid)

            record, _ = await UserAchievement.get_or_create(user_id=user_uuid)
            earned = await UserEarnedItem.get_or_none(user_achievement=record, item_code=tier_key)

            if not earned:
                first_tier = await Achievement.get_or_none(tier_key=tier_key, tier_level=1)
                if not first_tier:
                    logger.error(f"Achievement tier 1 missing: tier_key={tier_key}")
                    return AchievementProgressResult(unlocked=False)

                earned = UserEarnedItem(
                    user_achievement=record,
                    item_code=tier_key,
                    item_type=EarnedItemType.ACHIEVEMENT,
                    achievement=first_tier,
                    progress_current=0,
                    progress_target=first_tier.target_value,
                    progress_tier=1,
                )

            max_tier = master.max_tier

            # Guard: 현재 티어를 이미 달성했고 다음 티어가 없음
            if earned.id is not None and earned.progress_current >= earned.progress_target:
                next_def = None
                if not max_tier or earned.progress_tier < max_tier:
                    next_def = await Achievement.get_or_none(
                        tier_key=tier_key, tier_level=earned.progress_tier + 1
                    )
                if not next_def:
                    logger.debug(f"Max tier already reached: user_id={user_uuid}, tier_key={tier_key}")
                    return AchievementProgressResult(unlocked=False, max_tier_reached=True)

                # 나중에 추가된 다음 티어부터 이어서 진행
                earned.progress_tier = next_def.tier_level
                earned.progress_target = next_def.target_value
                earned.achievement = next_def

            earned.progress_current += increment

            unlocked_tier: Optional[int] = None
            unlocked_title: Optional[str] = None
            max_tier_reached = False

            while earned.progress_current >= earned.progress_target:
                tier_def = await Achievement.get_or_none(
                    tier_key=tier_key, tier_level=earned.progress_tier
                )

                if tier_def and tier_def.points > 0:
                    await self.award_points(str(user_uuid), tier_def.points)

                if tier_def:
                    unlocked_title = tier_def.title
                    await self._notify(
                        user_uuid,
                        NotificationType.ACHIEVEMENT_UNLOCKED,
                        title=f"업적 달성: {tier_def.title}",
                        message=tier_def.description,
                        context={
                            "tierKey": tier_key,
                            "tierLevel": earned.progress_tier,
                            "points": tier_def.points,
                        },
                    )

                unlocked_tier = earned.progress_tier
                logger.info(
                    f"Achievement unlocked: user_id={user_uuid}, tier_key={tier_key}, "
                    f"tier={earned.progress_tier}"
                )

                next_tier = earned.progress_tier + 1
                if max_tier and next_tier > max_tier:
                    max_tier_reached = True
                    break

                next_def = await Achievement.get_or_none(tier_key=tier_key, tier_level=next_tier)
                if not next_def:
                    max_tier_reached = True
                    break

                earned.progress_tier = next_tier
                earned.progress_target = next_def.target_value
                earned.achievement = next_def

            await earned.save()

            if unlocked_tier is not None:
                await self._remember_earned_item(user_uuid, earned.id)

            return AchievementProgressResult(
                unlocked=unlocked_tier is not None,
                unlocked_tier_level=unlocked_tier,
                unlocked_title=unlocked_title,
                max_tier_reached=max_tier_reached,
            )

        except Exception as e:
            logger.error(
                f"Achievement progress failed: user_id={user_id}, tier_key={tier_key}: {e}",
                exc_info=True
            )
            return AchievementProgressResult(unlocked=False, error=str(e))

    async def _remember_earned_item(self, user_id: uuid.UUID, earned_item_id: int) -> None:
        """게임화 행의 achievements 목록에 획득 아이템 추가"""
        record = await self._get_or_create_record(user_id)
        achievements = list(record.achievements or [])
        if earned_item_id not in achievements:
            achievements.append(earned_item_id)
            record.achievements = achievements
            await record.save(update_fields=["achievements", "updated_at"])

    # -------------------------------------------------------------------------
    # 요약
    # -------------------------------------------------------------------------

    async def get_gamification_summary(self, user_id: str) -> GamificationSummary:
        """
        게임화 요약 조회

        임계값 이상 경험치가 남은 행은 조회 전에 정규화합니다.
        업적 목록은 UserAchievement를 기준으로 합니다.

        Raises:
            InvalidIdError: 잘못된 유저 ID
            UserNotFoundError: 유저 없음
        """
        user_uuid = parse_id(user_id, "user_id")
        record = await self._get_or_create_record(user_uuid)

        if record.needs_normalization:
            try:
                if await self.normalize_level_if_needed(str(user_uuid)):
                    await record.refresh_from_db()
            except Exception as e:
                logger.warning(f"Level normalization failed: user_id={user_uuid}: {e}")

        achievements: List[AchievementSummary] = []
        user_achievement = await UserAchievement.get_or_none(user_id=user_uuid)
        if user_achievement:
            items = await UserEarnedItem.filter(
                user_achievement=user_achievement,
                item_type=EarnedItemType.ACHIEVEMENT,
            ).prefetch_related("achievement").order_by("id")

            for item in items:
                if not item.achievement:
                    continue
                achievements.append(AchievementSummary(
                    id=item.achievement.id,
                    title=item.achievement.title,
                    description=item.achievement.description,
                    progress=item.progress,
                ))

        return GamificationSummary(
            experience_points=record.experience_points,
            level=record.level,
            next_level_xp_threshold=record.next_level_xp_threshold,
            total_experience_points_ever_earned=record.total_experience_points_ever_earned,
            achievements=achievements,
        )

    # -------------------------------------------------------------------------
    # 출석 체크
    # -------------------------------------------------------------------------

    async def daily_check_in(self, user_id: str, now: Optional[datetime] = None) -> CheckInResult:
        """
        출석 체크

        하루 기준은 CHECK_IN.TIMEZONE 입니다.
        전날 출석했다면 연속 기록이 이어지고, 아니면 1일부터 다시 시작합니다.

        Raises:
            InvalidIdError: 잘못된 유저 ID
            UserNotFoundError: 유저 없음
        """
        user_uuid = parse_id(user_id, "user_id")
        now = ensure_aware(now) or utcnow()
        today = local_day(now, CHECK_IN.TIMEZONE)

        async with in_transaction() as conn:
            record = await self._get_or_create_record(user_uuid, using_db=conn)
            last_day = (
                local_day(record.last_check_in_at, CHECK_IN.TIMEZONE)
                if record.last_check_in_at else None
            )

            if last_day == today:
                return CheckInResult(
                    checked_in=False,
                    already_checked_in=True,
                    current_streak_days=record.current_streak_days,
                    longest_streak_days=record.longest_streak_days,
                )

            if last_day == today - timedelta(days=1):
                record.current_streak_days += 1
            else:
                record.current_streak_days = 1

            record.longest_streak_days = max(record.longest_streak_days, record.current_streak_days)
            record.last_check_in_at = now
            record.last_activity_at = now
            await record.save(
                using_db=conn,
                update_fields=[
                    "current_streak_days", "longest_streak_days",
                    "last_check_in_at", "last_activity_at", "updated_at",
                ],
            )

        logger.info(
            f"Check-in: user_id={user_uuid}, streak={record.current_streak_days}, "
            f"longest={record.longest_streak_days}"
        )

        progress = await self.track_achievement_progress(str(user_uuid), CHECK_IN.STREAK_ACHIEVEMENT)
        if progress.error:
            logger.warning(f"Streak achievement failed: user_id={user_uuid}: {progress.error}")

        return CheckInResult(
            checked_in=True,
            already_checked_in=False,
            current_streak_days=record.current_streak_days,
            longest_streak_days=record.longest_streak_days,
            achievement=progress,
        )

    async def get_check_in_status(self, user_id: str, now: Optional[datetime] = None) -> CheckInStatus:
        """출석 상태 조회 (행이 없으면 생성하지 않음)"""
        user_uuid = parse_id(user_id, "user_id")
        now = ensure_aware(now) or utcnow()

        record = await UserGamification.get_or_none(user_id=user_uuid)
        if not record or not record.last_check_in_at:
            return CheckInStatus(
                checked_in_today=False,
                current_streak_days=record.current_streak_days if record else 0,
                longest_streak_days=record.longest_streak_days if record else 0,
                last_check_in_at=None,
            )

        today = local_day(now, CHECK_IN.TIMEZONE)
        last_day = local_day(record.last_check_in_at, CHECK_IN.TIMEZONE)

        # 하루 이상 빠졌다면 다음 출석은 1일부터
        current_streak = record.current_streak_days if last_day >= today - timedelta(days=1) else 0

        return CheckInStatus(
            checked_in_today=last_day == today,
            current_streak_days=current_streak,
            longest_streak_days=record.longest_streak_days,
            last_check_in_at=record.last_check_in_at,
        )

    # -------------------------------------------------------------------------
    # 알림
    # -------------------------------------------------------------------------

    async def _notify(
        self,
        user_id: uuid.UUID,
        notification_type: NotificationType,
        title: str,
        message: str,
        context: Dict[str, Any],
    ) -> None:
        try:
            await self.notification_service.create_notification(
                recipient_id=user_id,
                notification_type=notification_type,
                title=title,
                message=message,
                context=context,
            )
        except Exception as e:
            logger.warning(
                f"Notification failed: user_id={user_id}, type={notification_type.value}: {e}"
            )
