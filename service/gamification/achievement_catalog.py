"""
티어 업적 카탈로그

업적 트랙(tier_key)별 목표값 목록으로 티어별 업적 행 데이터를 만듭니다.
희귀도와 보상 경험치는 지정하지 않으면 티어 순서에 따라 기본값을 사용합니다.
"""
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from models.achievement import AchievementCategory, AchievementRarity

DEFAULT_POINTS = (10, 20, 40, 80, 150, 250, 400)

DEFAULT_RARITIES = (
    AchievementRarity.COMMON,
    AchievementRarity.UNCOMMON,
    AchievementRarity.RARE,
    AchievementRarity.EPIC,
)


@dataclass(frozen=True)
class TierPlan:
    """업적 트랙 정의"""
    tier_key: str
    title_base: str
    description_base: str
    category: AchievementCategory
    event_name: str
    targets: Tuple[int, ...]
    rarities: Optional[Tuple[AchievementRarity, ...]] = None
    points: Optional[Tuple[int, ...]] = None
    is_secret: bool = False

    @property
    def max_tier(self) -> int:
        return len(self.targets)


TIER_PLANS: Tuple[TierPlan, ...] = (
    TierPlan(
        tier_key="FIRST_READER",
        title_base="독서의 첫걸음",
        description_base="에피소드 읽기",
        category=AchievementCategory.READING,
        event_name="USER_READ_EPISODE",
        targets=(1, 5, 10),
        points=(10, 25, 50),
    ),
    TierPlan(
        tier_key="READER_PROGRESS",
        title_base="성장하는 독자",
        description_base="누적 에피소드 읽기",
        category=AchievementCategory.READING,
        event_name="USER_READ_EPISODE",
        targets=(1, 10, 50, 200, 500),
    ),
    TierPlan(
        tier_key="COMPLETIONIST",
        title_base="끝까지 간다",
        description_base="소설 완독",
        category=AchievementCategory.READING,
        event_name="USER_COMPLETED_STORY",
        targets=(1, 5, 20),
    ),
    TierPlan(
        tier_key="FIRST_STORY_COMPLETED",
        title_base="첫 완독",
        description_base="스토리 완독",
        category=AchievementCategory.READING,
        event_name="USER_COMPLETED_STORY",
        targets=(1,),
    ),
    TierPlan(
        tier_key="DAILY_STREAK",
        title_base="멈추지 않는 출석",
        description_base="연속 출석",
        category=AchievementCategory.USER_PROGRESSION,
        event_name="USER_DAILY_CHECKIN_STREAK",
        targets=(3, 7, 14, 30, 100),
    ),
    TierPlan(
        tier_key="COMMENTER",
        title_base="수다쟁이",
        description_base="작품/에피소드 댓글",
        category=AchievementCategory.ENGAGEMENT,
        event_name="USER_COMMENTED",
        targets=(1, 10, 50, 200),
    ),
)


def default_points_for_index(index: int) -> int:
    """티어 순서별 기본 보상 경험치 (10, 20, 40, 80, 150, ...)"""
    if index < len(DEFAULT_POINTS):
        return DEFAULT_POINTS[index]
    return DEFAULT_POINTS[-1]


def default_rarity_for_index(index: int) -> AchievementRarity:
    """티어 순서별 기본 희귀도"""
    if index < len(DEFAULT_RARITIES):
        return DEFAULT_RARITIES[index]
    return AchievementRarity.LEGENDARY


def roman(number: int) -> str:
    """로마 숫자 (티어 표기용)"""
    table = (
        (1000, "M"), (900, "CM"), (500, "D"), (400, "CD"),
        (100, "C"), (90, "XC"), (50, "L"), (40, "XL"),
        (10, "X"), (9, "IX"), (5, "V"), (4, "IV"), (1, "I"),
    )
    result = ""
    for value, symbol in table:
        while number >= value:
            result += symbol
            number -= value
    return result


def build_tier_rows(plan: TierPlan) -> List[Dict[str, Any]]:
    """트랙 하나를 티어별 업적 행 데이터로 변환"""
    rows = []
    for index, target in enumerate(plan.targets):
        tier_level = index + 1
        rows.append({
            "achievement_code": f"{plan.tier_key}_T{tier_level}",
            "title": f"{plan.title_base} {roman(tier_level)}",
            "description": f"{plan.description_base} {target}회",
            "category": plan.category,
            "rarity": plan.rarities[index] if plan.rarities else default_rarity_for_index(index),
            "tier_key": plan.tier_key,
            "tier_level": tier_level,
            "max_tier": plan.max_tier,
            "unlock_conditions": [{"event_name": plan.event_name, "target_value": target}],
            "points": plan.points[index] if plan.points else default_points_for_index(index),
            "display_order": index,
            "is_secret": plan.is_secret,
            "is_active": True,
        })
    return rows


def build_catalog(plans: Tuple[TierPlan, ...] = TIER_PLANS) -> List[Dict[str, Any]]:
    """전체 업적 카탈로그 행 데이터"""
    rows: List[Dict[str, Any]] = []
    for plan in plans:
        rows.extend(build_tier_rows(plan))
    return rows
