"""
게임화 이벤트 리스너

도메인 이벤트를 구독하여 경험치 지급과 업적 진행을 처리합니다.
"""
import logging

from config import GAMIFICATION
from service.event.event_bus import DomainEvent, DomainEventType, EventBus

logger = logging.getLogger(__name__)


class GamificationListener:
    """
    게임화 리스너

    - 스토리 완독: 경험치 지급 + 완독 업적 진행
    - 로그인: 경험치 지급

    핸들러는 자신의 에러를 직접 잡아 로그로 남깁니다.
    """

    def __init__(self, event_bus: EventBus, gamification_service):
        self.event_bus = event_bus
        self.gamification_service = gamification_service
        self._registered = False

    def register_listeners(self) -> None:
        """이벤트 핸들러 등록 (여러 번 호출해도 한 번만 등록)"""
        if self._registered:
            logger.debug("Gamification listeners already registered")
            return

        self.event_bus.subscribe(DomainEventType.USER_COMPLETED_STORY, self.on_user_completed_story)
        self.event_bus.subscribe(DomainEventType.USER_LOGGED_IN, self.on_user_logged_in)
        self._registered = True

        logger.info("Gamification listeners registered")

    def unregister_listeners(self) -> None:
        """이벤트 핸들러 해제"""
        self.event_bus.unsubscribe(DomainEventType.USER_COMPLETED_STORY, self.on_user_completed_story)
        self.event_bus.unsubscribe(DomainEventType.USER_LOGGED_IN, self.on_user_logged_in)
        self._registered = False

    @property
    def is_registered(self) -> bool:
        return self._registered

    async def on_user_completed_story(self, event: DomainEvent) -> None:
        """스토리 완독 이벤트 처리"""
        story_id = event.data.get("storyId")
        try:
            await self.gamification_service.award_points(
                event.user_id, GAMIFICATION.STORY_COMPLETED_XP
            )
            result = await self.gamification_service.track_achievement_progress(
                event.user_id, GAMIFICATION.STORY_COMPLETED_ACHIEVEMENT
            )
            if result.unlocked:
                logger.info(
                    f"Story completion achievement unlocked: user_id={event.user_id}, "
                    f"story_id={story_id}, title={result.unlocked_title}"
                )
        except Exception as e:
            logger.error(
                f"Error handling story completion: user_id={event.user_id}, story_id={story_id}: {e}",
                exc_info=True
            )

    async def on_user_logged_in(self, event: DomainEvent) -> None:
        """로그인 이벤트 처리"""
        try:
            await self.gamification_service.award_points(event.user_id, GAMIFICATION.LOGIN_XP)
        except Exception as e:
            logger.error(
                f"Error handling login: user_id={event.user_id}: {e}",
                exc_info=True
            )
