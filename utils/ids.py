"""ID 파싱 유틸리티"""
import uuid
from typing import Any, Optional

from exceptions import InvalidIdError


def is_valid_id(value: Any) -> bool:
    """UUID 형식의 ID인지 확인"""
    if isinstance(value, uuid.UUID):
        return True
    if not isinstance(value, str):
        return False
    try:
        uuid.UUID(value)
    except ValueError:
        return False
    return True


def parse_id(value: Any, field_name: str = "id") -> uuid.UUID:
    """
    문자열 ID를 UUID로 변환

    Raises:
        InvalidIdError: UUID 형식이 아님
    """
    if isinstance(value, uuid.UUID):
        return value
    if not is_valid_id(value):
        raise InvalidIdError(field_name, value)
    return uuid.UUID(value)


def parse_optional_id(value: Optional[Any], field_name: str = "id") -> Optional[uuid.UUID]:
    """None을 허용하는 parse_id"""
    if value is None:
        return None
    return parse_id(value, field_name)
