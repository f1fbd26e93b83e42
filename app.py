# app.py
"""
NovelMaze 애플리케이션 진입점

환경변수를 읽어 데이터베이스를 연결하고, 이벤트 버스와 서비스를 조립합니다.
게임화 리스너는 이벤트 버스마다 한 번만 등록됩니다.
"""
import asyncio
import logging
import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv
from tortoise import Tortoise

from service.episode import EpisodeAccessService, PurchaseService
from service.event import EventBus
from service.gamification import GamificationListener, GamificationService, WalletService
from service.notification import NotificationService

load_dotenv()

DATABASE_URL = os.getenv('DATABASE_URL') or "sqlite://db.sqlite3"
LOG_LEVEL = (os.getenv('LOG_LEVEL') or "INFO").upper()
GENERATE_SCHEMAS = os.getenv('GENERATE_SCHEMAS') == "TRUE"

logger = logging.getLogger(__name__)

_registered_bus: Optional[EventBus] = None
_logging_configured = False


@dataclass
class AppContext:
    """조립된 서비스 묶음"""
    event_bus: EventBus
    gamification: GamificationService
    wallet: WalletService
    access: EpisodeAccessService
    purchase: PurchaseService
    notification: NotificationService
    listener: GamificationListener


def configure_logging(level: str = LOG_LEVEL) -> None:
    """로그 기본 설정 (한 번만)"""
    global _logging_configured
    if _logging_configured:
        return

    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    )
    _logging_configured = True


def build_context(event_bus: Optional[EventBus] = None) -> AppContext:
    """이벤트 버스와 서비스 조립"""
    event_bus = event_bus or EventBus()
    notification = NotificationService()
    gamification = GamificationService(notification_service=notification)

    return AppContext(
        event_bus=event_bus,
        gamification=gamification,
        wallet=WalletService(),
        access=EpisodeAccessService(),
        purchase=PurchaseService(notification_service=notification),
        notification=notification,
        listener=GamificationListener(event_bus, gamification),
    )


def register_listeners(context: AppContext) -> None:
    """게임화 리스너 등록 (같은 이벤트 버스에는 한 번)"""
    global _registered_bus
    if _registered_bus is context.event_bus:
        logger.debug("Listeners already registered on this event bus")
        return

    context.listener.register_listeners()
    _registered_bus = context.event_bus


async def init_db(db_url: str = DATABASE_URL, generate_schemas: bool = GENERATE_SCHEMAS) -> None:
    """데이터베이스 연결 초기화"""
    logger.info("데이터 베이스 연결 시작")
    await Tortoise.init(
        db_url=db_url,
        modules={"models": ["models"]}
    )
    if generate_schemas:
        await Tortoise.generate_schemas()
        logger.info("스키마 생성 완료")
    logger.info("데이터 베이스 연결")


async def init_app(
    db_url: str = DATABASE_URL,
    generate_schemas: bool = GENERATE_SCHEMAS,
) -> AppContext:
    """
    애플리케이션 초기화

    로그 설정 → DB 연결 → 서비스 조립 → 리스너 등록

    Returns:
        조립된 서비스 묶음
    """
    configure_logging()
    await init_db(db_url, generate_schemas)

    context = build_context()
    register_listeners(context)
    return context


async def close_app(context: AppContext) -> None:
    """대기 중인 이벤트를 처리하고 리스너 해제 후 DB 연결 종료"""
    global _registered_bus
    await context.event_bus.drain()

    context.listener.unregister_listeners()
    if _registered_bus is context.event_bus:
        _registered_bus = None

    await Tortoise.close_connections()
    logger.info("데이터 베이스 연결 종료")


async def main() -> None:
    context = await init_app()
    logger.info(f"NovelMaze ready (db={DATABASE_URL.split('://')[0]})")
    await close_app(context)


if __name__ == "__main__":
    asyncio.run(main())
