"""
애플리케이션 조립 통합 테스트
"""
import pytest

import app
from models import User, UserGamification
from service.event import DomainEventType
from tests.fixtures.users import DEFAULT_USER_DATA

pytestmark = pytest.mark.integration

MEMORY_DB = "sqlite://:memory:"


class TestAppWiring:
    @pytest.mark.asyncio
    async def test_init_and_close(self):
        context = await app.init_app(db_url=MEMORY_DB, generate_schemas=True)
        try:
            assert context.listener.is_registered is True
            assert context.event_bus.get_subscriber_count(DomainEventType.USER_LOGGED_IN) == 1
        finally:
            await app.close_app(context)

        assert context.listener.is_registered is False
        assert context.event_bus.get_subscriber_count(DomainEventType.USER_LOGGED_IN) == 0

    def test_listeners_registered_once_per_bus(self):
        first = app.build_context()
        second = app.build_context(event_bus=first.event_bus)

        app.register_listeners(first)
        app.register_listeners(second)

        assert first.listener.is_registered is True
        assert second.listener.is_registered is False
        assert first.event_bus.get_subscriber_count(DomainEventType.USER_COMPLETED_STORY) == 1

    def test_new_bus_gets_its_own_listeners(self):
        first = app.build_context()
        other = app.build_context()

        app.register_listeners(first)
        app.register_listeners(other)

        assert other.listener.is_registered is True
        assert other.event_bus.get_subscriber_count(DomainEventType.USER_LOGGED_IN) == 1

    @pytest.mark.asyncio
    async def test_login_event_awards_xp(self):
        context = await app.init_app(db_url=MEMORY_DB, generate_schemas=True)
        try:
            user = await User.create(**DEFAULT_USER_DATA)

            context.event_bus.emit_user_logged_in(str(user.id))
            await context.event_bus.drain()
            context.event_bus.emit_user_completed_story(str(user.id), "story-1")
            await context.event_bus.drain()

            record = await UserGamification.get(user_id=user.id)
            assert record.total_experience_points_ever_earned == 11
        finally:
            await app.close_app(context)

    @pytest.mark.asyncio
    async def test_reinit_keeps_listeners(self):
        """종료 후 다시 초기화해도 로그인 이벤트가 경험치를 지급"""
        first = await app.init_app(db_url=MEMORY_DB, generate_schemas=True)
        await app.close_app(first)

        context = await app.init_app(db_url=MEMORY_DB, generate_schemas=True)
        try:
            assert context.event_bus.get_subscriber_count(DomainEventType.USER_LOGGED_IN) == 1

            user = await User.create(**DEFAULT_USER_DATA)
            context.event_bus.emit_user_logged_in(str(user.id))
            await context.event_bus.drain()

            record = await UserGamification.get(user_id=user.id)
            assert record.total_experience_points_ever_earned == 1
        finally:
            await app.close_app(context)
