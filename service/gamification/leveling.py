"""
레벨 계산

경험치 초과분을 레벨로 변환하는 순수 함수들입니다.
레벨 곡선은 config.xp_required_for_level 하나로 결정됩니다.
"""
from dataclasses import dataclass
from typing import Callable, Tuple

from config import xp_required_for_level


@dataclass
class LevelUpResult:
    """레벨업 결과"""
    leveled_up: bool
    old_level: int
    new_level: int
    levels_gained: int
    experience_points: int
    next_level_xp_threshold: int


def calculate_level_up(
    level: int,
    experience_points: int,
    curve: Callable[[int], int] = xp_required_for_level,
) -> Tuple[int, int]:
    """
    현재 레벨과 레벨 내 경험치로부터 레벨업 후 상태 계산

    Args:
        level: 현재 레벨
        experience_points: 현재 레벨 내 누적 경험치
        curve: 레벨별 필요 경험치 함수

    Returns:
        (새 레벨, 남은 경험치)
    """
    remaining = max(0, experience_points)
    cost = curve(level)

    while cost > 0 and remaining >= cost:
        remaining -= cost
        level += 1
        cost = curve(level)

    return level, remaining


def build_level_up_result(old_level: int, experience_points: int) -> LevelUpResult:
    """calculate_level_up 결과를 LevelUpResult로 변환"""
    new_level, remaining = calculate_level_up(old_level, experience_points)
    return LevelUpResult(
        leveled_up=new_level > old_level,
        old_level=old_level,
        new_level=new_level,
        levels_gained=new_level - old_level,
        experience_points=remaining,
        next_level_xp_threshold=xp_required_for_level(new_level),
    )
