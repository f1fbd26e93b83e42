"""시간 유틸리티"""
from datetime import date, datetime, timezone
from typing import Optional
from zoneinfo import ZoneInfo


def utcnow() -> datetime:
    """현재 UTC 시각 (timezone-aware)"""
    return datetime.now(timezone.utc)


def ensure_aware(value: Optional[datetime]) -> Optional[datetime]:
    """naive datetime은 UTC로 간주하여 aware로 변환"""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def local_day(value: datetime, tz_name: str) -> date:
    """주어진 타임존 기준 날짜"""
    return ensure_aware(value).astimezone(ZoneInfo(tz_name)).date()
