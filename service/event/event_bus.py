"""
이벤트 버스 (Event Bus)

옵저버 패턴을 사용하여 도메인 이벤트를 발행하고 구독합니다.
발행자는 이벤트를 발행하기만 하면 되고, 구독자(게임화 리스너 등)가 처리합니다.
전역 싱글톤을 두지 않고, 진입점에서 생성한 인스턴스를 필요한 곳에 주입합니다.
"""

import asyncio
import logging
from datetime import datetime, timezone
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Set

logger = logging.getLogger(__name__)


class DomainEventType(Enum):
    """도메인 이벤트 타입"""

    USER_COMPLETED_STORY = "USER_COMPLETED_STORY"   # 스토리 완독
    USER_LOGGED_IN = "USER_LOGGED_IN"               # 로그인


@dataclass
class DomainEvent:
    """도메인 이벤트"""

    type: DomainEventType
    user_id: str
    data: Dict[str, Any] = field(default_factory=dict)
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def payload(self) -> Dict[str, Any]:
        """외부로 노출되는 페이로드 (camelCase)"""
        return {"userId": self.user_id, **self.data}

    def __repr__(self) -> str:
        return f"DomainEvent(type={self.type.value}, user_id={self.user_id}, data={self.data})"


class EventBus:
    """
    이벤트 버스

    발행(Publisher)과 구독(Subscriber)을 연결합니다.
    emit은 구독자 처리를 기다리지 않고 즉시 반환합니다 (fire-and-forget).

    Example:
        >>> event_bus = EventBus()
        >>>
        >>> async def on_login(event: DomainEvent):
        ...     print(f"Logged in: {event.user_id}")
        >>>
        >>> event_bus.subscribe(DomainEventType.USER_LOGGED_IN, on_login)
        >>> event_bus.emit_user_logged_in("5c6f...")
        >>> await event_bus.drain()
    """

    def __init__(self):
        self._subscribers: Dict[DomainEventType, List[Callable]] = {}
        self._pending: Set[asyncio.Task] = set()
        logger.info("EventBus instance created")

    def subscribe(self, event_type: DomainEventType, callback: Callable) -> None:
        """
        이벤트 구독

        같은 콜백을 두 번 등록해도 한 번만 호출됩니다.

        Args:
            event_type: 구독할 이벤트 타입
            callback: 이벤트 발생 시 호출할 콜백 함수 (async function)
        """
        if event_type not in self._subscribers:
            self._subscribers[event_type] = []

        if callback not in self._subscribers[event_type]:
            self._subscribers[event_type].append(callback)
            logger.debug(f"Subscribed to {event_type.value}: {callback.__name__}")

    def unsubscribe(self, event_type: DomainEventType, callback: Callable) -> None:
        """
        구독 취소

        Args:
            event_type: 구독 취소할 이벤트 타입
            callback: 구독 취소할 콜백 함수
        """
        if event_type in self._subscribers:
            try:
                self._subscribers[event_type].remove(callback)
                logger.debug(f"Unsubscribed from {event_type.value}: {callback.__name__}")
            except ValueError:
                pass

    async def publish(self, event: DomainEvent) -> None:
        """
        이벤트 발행 (구독자 처리 완료까지 대기)

        각 구독자의 콜백이 순차적으로 호출되며, 에러가 발생해도 다른 구독자에게 영향을 주지 않습니다.

        Args:
            event: 발행할 이벤트
        """
        if event.type not in self._subscribers:
            logger.debug(f"No subscribers for event: {event.type.value}")
            return

        logger.debug(f"Publishing event: {event}")

        for callback in list(self._subscribers[event.type]):
            try:
                await callback(event)
            except Exception as e:
                logger.error(
                    f"Error in event callback {callback.__name__} for {event.type.value}: {e}",
                    exc_info=True
                )

    def emit(self, event: DomainEvent) -> Optional[asyncio.Task]:
        """
        이벤트 발행 (fire-and-forget)

        실행 중인 이벤트 루프에 publish 태스크를 예약하고 즉시 반환합니다.
        대기열, 재시도, 백프레셔는 없습니다.
        실행 중인 루프가 없으면(동기 코드에서 호출) 경고를 남기고 이벤트를 버립니다.

        Returns:
            예약된 태스크 (루프가 없으면 None)
        """
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.warning(f"No running event loop, event dropped: {event}")
            return None

        task = loop.create_task(self.publish(event))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    def emit_user_completed_story(self, user_id: str, story_id: str) -> Optional[asyncio.Task]:
        """USER_COMPLETED_STORY 이벤트 발행"""
        return self.emit(DomainEvent(
            type=DomainEventType.USER_COMPLETED_STORY,
            user_id=str(user_id),
            data={"storyId": str(story_id)},
        ))

    def emit_user_logged_in(self, user_id: str) -> Optional[asyncio.Task]:
        """USER_LOGGED_IN 이벤트 발행"""
        return self.emit(DomainEvent(
            type=DomainEventType.USER_LOGGED_IN,
            user_id=str(user_id),
        ))

    async def drain(self) -> None:
        """예약된 모든 이벤트 처리가 끝날 때까지 대기 (종료/테스트용)"""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    @property
    def pending_count(self) -> int:
        """처리 대기 중인 이벤트 수"""
        return len(self._pending)

    def get_subscriber_count(self, event_type: DomainEventType) -> int:
        """
        특정 이벤트 타입의 구독자 수 반환

        Args:
            event_type: 이벤트 타입

        Returns:
            구독자 수
        """
        return len(self._subscribers.get(event_type, []))

    def clear_all_subscribers(self) -> None:
        """모든 구독자 제거 (테스트용)"""
        self._subscribers.clear()
        logger.info("All subscribers cleared")
