"""
exceptions.py 유닛 테스트
"""
import pytest

from exceptions import (
    NovelMazeError,
    InvalidIdError,
    InvalidAmountError,
    UserNotFoundError,
    EpisodeNotFoundError,
    AchievementNotFoundError,
    PurchaseError,
    PurchaseErrorCode,
    EpisodeNovelMismatchError,
    EpisodeNotPurchasableError,
    EpisodeAlreadyOwnedError,
    WalletNotFoundError,
    InsufficientCoinsError,
)


class TestNovelMazeError:
    """기본 예외 클래스 테스트"""

    def test_default_message(self):
        """기본 메시지 테스트"""
        error = NovelMazeError()
        assert error.message == "알 수 없는 오류가 발생했습니다"
        assert str(error) == "알 수 없는 오류가 발생했습니다"

    def test_custom_message(self):
        """커스텀 메시지 테스트"""
        error = NovelMazeError("커스텀 에러 메시지")
        assert error.message == "커스텀 에러 메시지"
        assert str(error) == "커스텀 에러 메시지"

    def test_inheritance(self):
        """상속 관계 테스트"""
        assert isinstance(NovelMazeError(), Exception)


class TestValidationErrors:
    """검증 예외 테스트"""

    def test_invalid_id_stores_field_and_value(self):
        error = InvalidIdError("episode_id", "not-a-uuid")
        assert error.field_name == "episode_id"
        assert error.value == "not-a-uuid"
        assert "not-a-uuid" in str(error)
        assert isinstance(error, NovelMazeError)

    def test_invalid_amount(self):
        error = InvalidAmountError(-5)
        assert error.amount == -5
        assert "-5" in str(error)


class TestNotFoundErrors:
    """조회 실패 예외 테스트"""

    def test_user_not_found_message(self):
        error = UserNotFoundError("abc")
        assert error.user_id == "abc"
        assert "찾을 수 없습니다" in str(error)

    def test_episode_not_found_message(self):
        error = EpisodeNotFoundError("ep-1")
        assert error.episode_id == "ep-1"
        assert "ep-1" in str(error)

    def test_achievement_not_found_with_tier(self):
        """티어 지정 시 메시지에 티어 포함"""
        error = AchievementNotFoundError("FIRST_READER", 2)
        assert error.tier_key == "FIRST_READER"
        assert error.tier_level == 2
        assert "2단계" in str(error)

    def test_achievement_not_found_without_tier(self):
        error = AchievementNotFoundError("FIRST_READER")
        assert error.tier_level is None
        assert "FIRST_READER" in str(error)


class TestPurchaseErrors:
    """구매 예외 테스트"""

    def test_base_purchase_error_is_infrastructure_failure(self):
        error = PurchaseError("DB 오류")
        assert error.code == PurchaseErrorCode.INFRASTRUCTURE_FAILURE
        assert error.details == {}

    @pytest.mark.parametrize(
        "error, expected_code",
        [
            (EpisodeNovelMismatchError("e", "n"), PurchaseErrorCode.EPISODE_NOVEL_MISMATCH),
            (EpisodeNotPurchasableError("e"), PurchaseErrorCode.NOT_PURCHASABLE),
            (EpisodeAlreadyOwnedError("e"), PurchaseErrorCode.ALREADY_OWNED),
            (WalletNotFoundError("u"), PurchaseErrorCode.WALLET_NOT_FOUND),
            (InsufficientCoinsError(30, 0), PurchaseErrorCode.INSUFFICIENT_FUNDS),
        ],
    )
    def test_error_codes(self, error, expected_code):
        """각 구매 예외는 고유한 실패 코드를 가짐"""
        assert error.code == expected_code
        assert isinstance(error, PurchaseError)
        assert isinstance(error, NovelMazeError)

    def test_insufficient_coins_details(self):
        """코인 부족 예외는 필요/보유 금액을 details로 전달"""
        error = InsufficientCoinsError(required=30, current=10)
        assert error.required == 30
        assert error.current == 10
        assert error.details == {"requiredAmount": 30, "currentBalance": 10}
        assert "30" in str(error)
        assert "10" in str(error)

    def test_error_code_values_are_strings(self):
        assert PurchaseErrorCode.ALREADY_OWNED == "ALREADY_OWNED"
        assert len(PurchaseErrorCode) == 10
