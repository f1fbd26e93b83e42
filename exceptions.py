"""
NovelMaze 커스텀 예외 클래스 정의

모든 예외는 NovelMazeError를 상속받아 일관된 에러 처리를 제공합니다.
구매 관련 예외는 PurchaseErrorCode를 가지며, 트랜잭션 롤백을 위해 사용됩니다.
"""
from enum import Enum
from typing import Any, Dict, Optional


class NovelMazeError(Exception):
    """NovelMaze 기본 예외 클래스"""

    def __init__(self, message: str = "알 수 없는 오류가 발생했습니다"):
        self.message = message
        super().__init__(self.message)


# =============================================================================
# 검증 관련 예외
# =============================================================================


class InvalidIdError(NovelMazeError):
    """잘못된 형식의 ID"""

    def __init__(self, field_name: str, value: Any):
        self.field_name = field_name
        self.value = value
        super().__init__(f"잘못된 {field_name} 형식입니다: {value}")


class InvalidAmountError(NovelMazeError):
    """잘못된 수량/금액"""

    def __init__(self, amount: int):
        self.amount = amount
        super().__init__(f"수량은 0보다 커야 합니다: {amount}")


# =============================================================================
# 조회 실패 예외
# =============================================================================


class UserNotFoundError(NovelMazeError):
    """사용자를 찾을 수 없음"""

    def __init__(self, user_id: Any):
        self.user_id = user_id
        super().__init__(f"사용자를 찾을 수 없습니다: {user_id}")


class NovelNotFoundError(NovelMazeError):
    """소설을 찾을 수 없음"""

    def __init__(self, novel_id: Any):
        self.novel_id = novel_id
        super().__init__(f"소설을 찾을 수 없습니다: {novel_id}")


class EpisodeNotFoundError(NovelMazeError):
    """에피소드를 찾을 수 없음"""

    def __init__(self, episode_id: Any):
        self.episode_id = episode_id
        super().__init__(f"에피소드를 찾을 수 없습니다: {episode_id}")


class AchievementNotFoundError(NovelMazeError):
    """업적 정의를 찾을 수 없음"""

    def __init__(self, tier_key: str, tier_level: Optional[int] = None):
        self.tier_key = tier_key
        self.tier_level = tier_level
        if tier_level is None:
            super().__init__(f"업적을 찾을 수 없습니다: {tier_key}")
        else:
            super().__init__(f"업적 '{tier_key}'의 {tier_level}단계를 찾을 수 없습니다")


# =============================================================================
# 구매 관련 예외
# =============================================================================


class PurchaseErrorCode(str, Enum):
    """구매 실패 코드"""

    INVALID_ID = "INVALID_ID"
    USER_NOT_FOUND = "USER_NOT_FOUND"
    EPISODE_NOT_FOUND = "EPISODE_NOT_FOUND"
    NOVEL_NOT_FOUND = "NOVEL_NOT_FOUND"
    EPISODE_NOVEL_MISMATCH = "EPISODE_NOVEL_MISMATCH"
    NOT_PURCHASABLE = "NOT_PURCHASABLE"
    ALREADY_OWNED = "ALREADY_OWNED"
    WALLET_NOT_FOUND = "WALLET_NOT_FOUND"
    INSUFFICIENT_FUNDS = "INSUFFICIENT_FUNDS"
    INFRASTRUCTURE_FAILURE = "INFRASTRUCTURE_FAILURE"


class PurchaseError(NovelMazeError):
    """구매 관련 기본 예외"""

    code: PurchaseErrorCode = PurchaseErrorCode.INFRASTRUCTURE_FAILURE

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.details = details or {}
        super().__init__(message)


class EpisodeNovelMismatchError(PurchaseError):
    """에피소드가 해당 소설에 속하지 않음"""

    code = PurchaseErrorCode.EPISODE_NOVEL_MISMATCH

    def __init__(self, episode_id: Any, novel_id: Any):
        super().__init__(
            "이 에피소드는 해당 소설의 에피소드가 아닙니다",
            {"episodeId": str(episode_id), "novelId": str(novel_id)},
        )


class EpisodeNotPurchasableError(PurchaseError):
    """무료 에피소드는 구매 불가"""

    code = PurchaseErrorCode.NOT_PURCHASABLE

    def __init__(self, episode_id: Any):
        super().__init__(
            "무료 에피소드는 구매할 필요가 없습니다",
            {"episodeId": str(episode_id)},
        )


class EpisodeAlreadyOwnedError(PurchaseError):
    """이미 구매한 에피소드"""

    code = PurchaseErrorCode.ALREADY_OWNED

    def __init__(self, episode_id: Any):
        super().__init__(
            "이미 구매한 에피소드입니다",
            {"episodeId": str(episode_id)},
        )


class WalletNotFoundError(PurchaseError):
    """지갑 정보 없음"""

    code = PurchaseErrorCode.WALLET_NOT_FOUND

    def __init__(self, user_id: Any):
        super().__init__(
            "사용자의 지갑 정보를 찾을 수 없습니다",
            {"userId": str(user_id)},
        )


class InsufficientCoinsError(PurchaseError):
    """코인 부족"""

    code = PurchaseErrorCode.INSUFFICIENT_FUNDS

    def __init__(self, required: int, current: int):
        self.required = required
        self.current = current
        super().__init__(
            f"코인이 부족합니다. (필요: {required}, 보유: {current})",
            {"requiredAmount": required, "currentBalance": current},
        )
