"""
에피소드 구매 서비스

코인으로 유료 에피소드를 구매합니다.
검증, 코인 차감, 구매 기록, 통계, 서재 반영이 하나의 트랜잭션에서 처리되며
어느 단계에서든 예외가 발생하면 전체가 롤백됩니다.
"""
import logging
import secrets
import string
import time
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional

from tortoise.expressions import F
from tortoise.transactions import in_transaction

from config import PURCHASE
from exceptions import (
    EpisodeAlreadyOwnedError,
    EpisodeNotFoundError,
    EpisodeNotPurchasableError,
    EpisodeNovelMismatchError,
    InsufficientCoinsError,
    InvalidIdError,
    NovelNotFoundError,
    PurchaseError,
    PurchaseErrorCode,
    UserNotFoundError,
    WalletNotFoundError,
)
from models import (
    Episode,
    LibraryItemStatus,
    LibraryItemType,
    Novel,
    NotificationType,
    Purchase,
    PurchaseItem,
    PurchaseItemType,
    PurchaseStatus,
    User,
    UserGamification,
    UserLibraryItem,
)
from service.episode.access_service import EpisodeAccessService
from service.notification import NotificationService
from utils.clock import utcnow
from utils.ids import parse_id, parse_optional_id

logger = logging.getLogger(__name__)

_BASE36 = string.digits + string.ascii_lowercase

# 구매 예외가 아닌 조회/검증 예외의 실패 코드
_ERROR_CODES = (
    (InvalidIdError, PurchaseErrorCode.INVALID_ID),
    (UserNotFoundError, PurchaseErrorCode.USER_NOT_FOUND),
    (EpisodeNotFoundError, PurchaseErrorCode.EPISODE_NOT_FOUND),
    (NovelNotFoundError, PurchaseErrorCode.NOVEL_NOT_FOUND),
)


class PurchaseStage(str, Enum):
    """구매 진행 단계"""

    VALIDATING = "VALIDATING"
    DEBITING = "DEBITING"
    RECORDING = "RECORDING"
    LIBRARY_UPDATE = "LIBRARY_UPDATE"
    COMMITTED = "COMMITTED"
    ABORTED = "ABORTED"


# =============================================================================
# 결과 데이터
# =============================================================================


@dataclass
class PurchaseReceipt:
    """구매 영수증"""
    id: str
    purchase_readable_id: str
    amount: int
    new_balance: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "purchaseReadableId": self.purchase_readable_id,
            "amount": self.amount,
            "newBalance": self.new_balance,
        }


@dataclass
class PurchaseFailure:
    code: PurchaseErrorCode
    details: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {"code": self.code.value, "details": self.details}


@dataclass
class PurchaseResult:
    """구매 결과"""
    success: bool
    message: str
    stage: PurchaseStage
    purchase: Optional[PurchaseReceipt] = None
    error: Optional[PurchaseFailure] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"success": self.success, "message": self.message}
        if self.purchase is not None:
            data["purchase"] = self.purchase.to_dict()
        if self.error is not None:
            data["error"] = self.error.to_dict()
        return data


@dataclass
class PurchaseEligibility:
    """구매 가능 여부 (사전 확인용)"""
    can_purchase: bool
    reason: Optional[str] = None
    current_balance: Optional[int] = None
    required_amount: Optional[int] = None
    code: Optional[PurchaseErrorCode] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"canPurchase": self.can_purchase}
        if self.reason is not None:
            data["reason"] = self.reason
        if self.current_balance is not None:
            data["currentBalance"] = self.current_balance
        if self.required_amount is not None:
            data["requiredAmount"] = self.required_amount
        return data


def generate_purchase_readable_id() -> str:
    """구매 번호 생성 (PUR-EP-<epoch ms>-<base36 9자리>)"""
    suffix = "".join(secrets.choice(_BASE36) for _ in range(PURCHASE.READABLE_ID_RANDOM_LENGTH))
    return f"{PURCHASE.READABLE_ID_PREFIX}-{int(time.time() * 1000)}-{suffix}"


def resolve_error_code(error: Exception) -> PurchaseErrorCode:
    """예외를 구매 실패 코드로 변환"""
    if isinstance(error, PurchaseError):
        return error.code
    for error_type, code in _ERROR_CODES:
        if isinstance(error, error_type):
            return code
    return PurchaseErrorCode.INFRASTRUCTURE_FAILURE


# =============================================================================
# 서비스
# =============================================================================


class PurchaseService:
    """에피소드 구매 서비스"""

    def __init__(self, notification_service: Any = NotificationService):
        self.notification_service = notification_service

    async def purchase_episode(
        self,
        user_id: str,
        episode_id: str,
        novel_id: Optional[str] = None,
    ) -> PurchaseResult:
        """
        에피소드 구매

        단계: VALIDATING → DEBITING → RECORDING → LIBRARY_UPDATE → COMMITTED
        실패 시 ABORTED 이며 모든 쓰기가 롤백됩니다.

        Args:
            user_id: 구매자 ID
            episode_id: 에피소드 ID
            novel_id: 소설 ID (없으면 에피소드의 소설)

        Returns:
            구매 결과 (예외를 던지지 않음)
        """
        stage = PurchaseStage.VALIDATING

        try:
            user_uuid = parse_id(user_id, "user_id")
            episode_uuid = parse_id(episode_id, "episode_id")
            novel_uuid = parse_optional_id(novel_id, "novel_id")

            async with in_transaction() as conn:
                # === Guard: 검증 ===
                user = await User.get_or_none(id=user_uuid, using_db=conn)
                if not user:
                    raise UserNotFoundError(user_uuid)

                episode = await Episode.get_or_none(id=episode_uuid, using_db=conn)
                if not episode:
                    raise EpisodeNotFoundError(episode_uuid)

                novel = await Novel.get_or_none(id=novel_uuid or episode.novel_id, using_db=conn)
                if not novel:
                    raise NovelNotFoundError(novel_uuid or episode.novel_id)

                if str(episode.novel_id) != str(novel.id):
                    raise EpisodeNovelMismatchError(episode.id, novel.id)

                if episode.is_free:
                    raise EpisodeNotPurchasableError(episode.id)

                if await EpisodeAccessService.has_user_purchased_episode(user.id, episode.id, using_db=conn):
                    raise EpisodeAlreadyOwnedError(episode.id)

                effective_price = await episode.get_effective_price(novel=novel, using_db=conn)
                original_price = await episode.get_original_price(novel=novel, using_db=conn)
                discount = max(0, original_price - effective_price)

                wallet = await UserGamification.get_or_none(user_id=user.id, using_db=conn)
                if not wallet:
                    raise WalletNotFoundError(user.id)

                if wallet.coin_balance < effective_price:
                    raise InsufficientCoinsError(effective_price, wallet.coin_balance)

                # === Transaction: 코인 차감 ===
                stage = PurchaseStage.DEBITING
                now = utcnow()
                debited = await UserGamification.filter(
                    id=wallet.id, coin_balance__gte=effective_price
                ).using_db(conn).update(
                    coin_balance=F("coin_balance") - effective_price,
                    last_coin_transaction_at=now,
                )
                if not debited:
                    await wallet.refresh_from_db(fields=["coin_balance"], using_db=conn)
                    raise InsufficientCoinsError(effective_price, wallet.coin_balance)
                await wallet.refresh_from_db(fields=["coin_balance"], using_db=conn)

                # === Transaction: 구매 기록 + 통계 ===
                stage = PurchaseStage.RECORDING
                purchase = await self._create_purchase_record(
                    user, novel, episode, effective_price, discount, now, using_db=conn
                )

                await Episode.filter(id=episode.id).using_db(conn).update(
                    purchases_count=F("purchases_count") + 1
                )
                await Novel.filter(id=novel.id).using_db(conn).update(
                    total_revenue_coins=F("total_revenue_coins") + effective_price,
                    purchases_count=F("purchases_count") + 1,
                )

                # === Transaction: 서재 반영 ===
                stage = PurchaseStage.LIBRARY_UPDATE
                await self._add_episode_to_user_library(user.id, novel.id, episode, using_db=conn)

            stage = PurchaseStage.COMMITTED

        except Exception as e:
            return self._failure(e, stage, user_id, episode_id)

        logger.info(
            f"Episode purchased: user_id={user.id}, episode_id={episode.id}, "
            f"purchase={purchase.purchase_readable_id}, amount={effective_price}, "
            f"balance={wallet.coin_balance}"
        )

        await self._notify_purchase(user.id, novel, episode, purchase, effective_price)

        return PurchaseResult(
            success=True,
            message="에피소드를 구매했습니다",
            stage=stage,
            purchase=PurchaseReceipt(
                id=str(purchase.id),
                purchase_readable_id=purchase.purchase_readable_id,
                amount=effective_price,
                new_balance=wallet.coin_balance,
            ),
        )

    async def check_user_can_purchase(self, user_id: str, episode_id: str) -> PurchaseEligibility:
        """
        구매 가능 여부 사전 확인 (상태 변경 없음)

        Args:
            user_id: 유저 ID
            episode_id: 에피소드 ID
        """
        try:
            user_uuid = parse_id(user_id, "user_id")
            episode_uuid = parse_id(episode_id, "episode_id")

            wallet = await UserGamification.get_or_none(user_id=user_uuid)
            if not wallet:
                error = WalletNotFoundError(user_uuid)
                return PurchaseEligibility(can_purchase=False, reason=error.message, code=error.code)

            episode = await Episode.get_or_none(id=episode_uuid)
            if not episode:
                return PurchaseEligibility(
                    can_purchase=False,
                    reason=EpisodeNotFoundError(episode_uuid).message,
                    code=PurchaseErrorCode.EPISODE_NOT_FOUND,
                )

            if episode.is_free:
                error = EpisodeNotPurchasableError(episode.id)
                return PurchaseEligibility(can_purchase=False, reason=error.message, code=error.code)

            if await EpisodeAccessService.has_user_purchased_episode(user_uuid, episode.id):
                error = EpisodeAlreadyOwnedError(episode.id)
                return PurchaseEligibility(can_purchase=False, reason=error.message, code=error.code)

            effective_price = await episode.get_effective_price()

            if wallet.coin_balance < effective_price:
                error = InsufficientCoinsError(effective_price, wallet.coin_balance)
                return PurchaseEligibility(
                    can_purchase=False,
                    reason=error.message,
                    current_balance=wallet.coin_balance,
                    required_amount=effective_price,
                    code=error.code,
                )

            return PurchaseEligibility(
                can_purchase=True,
                current_balance=wallet.coin_balance,
                required_amount=effective_price,
            )

        except InvalidIdError as e:
            return PurchaseEligibility(can_purchase=False, reason=e.message, code=PurchaseErrorCode.INVALID_ID)
        except Exception as e:
            logger.error(
                f"Purchase eligibility check failed: user_id={user_id}, episode_id={episode_id}: {e}",
                exc_info=True
            )
            return PurchaseEligibility(
                can_purchase=False,
                reason="구매 가능 여부 확인 중 오류가 발생했습니다",
                code=PurchaseErrorCode.INFRASTRUCTURE_FAILURE,
            )

    # -------------------------------------------------------------------------
    # 내부 처리
    # -------------------------------------------------------------------------

    @staticmethod
    async def _create_purchase_record(
        user: User,
        novel: Novel,
        episode: Episode,
        price: int,
        discount: int,
        now,
        using_db,
    ) -> Purchase:
        purchase = await Purchase.create(
            purchase_readable_id=generate_purchase_readable_id(),
            user=user,
            status=PurchaseStatus.COMPLETED,
            total_amount=price,
            total_discount_amount=discount,
            final_amount=price,
            currency=PURCHASE.CURRENCY,
            metadata={
                "novelId": str(novel.id),
                "novelTitle": novel.title,
                "episodeTitle": episode.title,
                "episodeOrder": episode.episode_order,
                "accessType": episode.access_type.value,
            },
            completed_at=now,
            using_db=using_db,
        )

        await PurchaseItem.create(
            purchase=purchase,
            item_type=PurchaseItemType.NOVEL_EPISODE,
            item_id=episode.id,
            title=episode.title,
            description=f"{episode.episode_order}화: {episode.title} ({novel.title})",
            quantity=1,
            unit_price=price,
            discount_amount=discount,
            subtotal=price,
            currency=PURCHASE.CURRENCY,
            seller_id=novel.author_id,
            using_db=using_db,
        )
        return purchase

    @staticmethod
    async def _add_episode_to_user_library(
        user_id: uuid.UUID,
        novel_id: uuid.UUID,
        episode: Episode,
        using_db=None,
    ) -> UserLibraryItem:
        """
        구매한 에피소드를 유저 서재에 추가

        서재 항목이 없으면 owned + reading 상태로 새로 만들고,
        있으면 에피소드를 추가하고 owned 상태를 보장합니다.
        """
        library_item = await UserLibraryItem.get_or_none(
            user_id=user_id,
            novel_id=novel_id,
            item_type=LibraryItemType.NOVEL,
            using_db=using_db,
        )

        if library_item:
            if library_item.add_status(LibraryItemStatus.OWNED):
                await library_item.save(using_db=using_db, update_fields=["statuses"])
        else:
            library_item = await UserLibraryItem.create(
                user_id=user_id,
                novel_id=novel_id,
                item_type=LibraryItemType.NOVEL,
                statuses=[LibraryItemStatus.OWNED.value, LibraryItemStatus.READING.value],
                first_acquired_at=utcnow(),
                using_db=using_db,
            )

        await library_item.purchased_episodes.add(episode, using_db=using_db)
        return library_item

    def _failure(
        self,
        error: Exception,
        stage: PurchaseStage,
        user_id: Any,
        episode_id: Any,
    ) -> PurchaseResult:
        code = resolve_error_code(error)

        if code == PurchaseErrorCode.INFRASTRUCTURE_FAILURE:
            logger.error(
                f"Purchase aborted: user_id={user_id}, episode_id={episode_id}, stage={stage.value}: {error}",
                exc_info=True
            )
            message = "에피소드 구매 중 오류가 발생했습니다"
            details: Dict[str, Any] = {"error": str(error)}
        else:
            logger.info(
                f"Purchase rejected: user_id={user_id}, episode_id={episode_id}, "
                f"code={code.value}, stage={stage.value}"
            )
            message = getattr(error, "message", str(error))
            details = dict(getattr(error, "details", {}) or {})

        details["stage"] = stage.value

        return PurchaseResult(
            success=False,
            message=message,
            stage=PurchaseStage.ABORTED,
            error=PurchaseFailure(code=code, details=details),
        )

    async def _notify_purchase(
        self,
        user_id: uuid.UUID,
        novel: Novel,
        episode: Episode,
        purchase: Purchase,
        amount: int,
    ) -> None:
        try:
            await self.notification_service.create_notification(
                recipient_id=user_id,
                notification_type=NotificationType.EPISODE_PURCHASED,
                title=f"구매 완료: {episode.title}",
                message=f"{novel.title} {episode.episode_order}화를 {amount} 코인에 구매했습니다.",
                context={
                    "purchaseId": str(purchase.id),
                    "purchaseReadableId": purchase.purchase_readable_id,
                    "novelId": str(novel.id),
                    "episodeId": str(episode.id),
                    "amount": amount,
                },
            )
        except Exception as e:
            logger.warning(f"Purchase notification failed: user_id={user_id}, purchase={purchase.id}: {e}")
