"""
지갑 서비스 통합 테스트
"""
import uuid

import pytest

from exceptions import InvalidAmountError, UserNotFoundError
from models import UserGamification
from service.gamification import WalletService

pytestmark = pytest.mark.integration


class TestWalletService:
    @pytest.mark.asyncio
    async def test_balance_without_record(self, reader):
        assert await WalletService.get_balance(str(reader.id)) == 0

    @pytest.mark.asyncio
    async def test_credit_creates_record(self, reader):
        balance = await WalletService.credit_coins(str(reader.id), 50, reason="test")

        assert balance == 50
        record = await UserGamification.get(user_id=reader.id)
        assert record.coin_balance == 50
        assert record.last_coin_transaction_at is not None

    @pytest.mark.asyncio
    async def test_credit_accumulates(self, reader):
        await WalletService.credit_coins(str(reader.id), 50)
        balance = await WalletService.credit_coins(str(reader.id), 25)

        assert balance == 75
        assert await WalletService.get_balance(str(reader.id)) == 75

    @pytest.mark.asyncio
    @pytest.mark.parametrize("amount", [0, -10])
    async def test_non_positive_amount_rejected(self, reader, amount):
        with pytest.raises(InvalidAmountError):
            await WalletService.credit_coins(str(reader.id), amount)

    @pytest.mark.asyncio
    async def test_unknown_user(self, test_db):
        with pytest.raises(UserNotFoundError):
            await WalletService.credit_coins(str(uuid.uuid4()), 10)
