"""
지갑 서비스

코인 잔액 조회와 적립을 담당합니다.
코인 차감은 에피소드 구매 트랜잭션(PurchaseService)에서만 일어납니다.
"""
import logging

from tortoise.expressions import F
from tortoise.transactions import in_transaction

from exceptions import InvalidAmountError, UserNotFoundError
from models import User, UserGamification
from utils.clock import utcnow
from utils.ids import parse_id

logger = logging.getLogger(__name__)


class WalletService:
    """지갑 서비스"""

    @staticmethod
    async def get_balance(user_id: str) -> int:
        """
        코인 잔액 조회

        Returns:
            잔액 (게임화 행이 없으면 0)
        """
        user_uuid = parse_id(user_id, "user_id")
        record = await UserGamification.get_or_none(user_id=user_uuid)
        return record.coin_balance if record else 0

    @staticmethod
    async def credit_coins(user_id: str, amount: int, reason: str = "") -> int:
        """
        코인 적립

        Args:
            user_id: 유저 ID
            amount: 적립할 코인 (양수)
            reason: 적립 사유 (로그용)

        Returns:
            적립 후 잔액

        Raises:
            InvalidIdError: 잘못된 유저 ID
            InvalidAmountError: amount <= 0
            UserNotFoundError: 유저 없음
        """
        user_uuid = parse_id(user_id, "user_id")
        if amount <= 0:
            raise InvalidAmountError(amount)

        async with in_transaction() as conn:
            if not await User.exists(id=user_uuid, using_db=conn):
                raise UserNotFoundError(user_uuid)

            record, _ = await UserGamification.get_or_create(user_id=user_uuid, using_db=conn)
            await UserGamification.filter(id=record.id).using_db(conn).update(
                coin_balance=F("coin_balance") + amount,
                last_coin_transaction_at=utcnow(),
            )
            await record.refresh_from_db(fields=["coin_balance"], using_db=conn)

        logger.info(
            f"Coins credited: user_id={user_uuid}, amount={amount}, "
            f"balance={record.coin_balance}, reason={reason}"
        )
        return record.coin_balance
