"""도메인 이벤트 버스"""

from service.event.event_bus import EventBus, DomainEvent, DomainEventType

__all__ = [
    "EventBus",
    "DomainEvent",
    "DomainEventType",
]
