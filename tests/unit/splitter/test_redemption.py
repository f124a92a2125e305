"""
splitter/redemption.py 테스트

withdraw / transfer_all, 롤백, 재진입 시 이중 지급 방지 검증
"""

import asyncio

import pytest
import pytest_asyncio

from adapters.mock.gateway import MockValueGateway
from adapters.models import ReleaseReceipt
from core.domain.events import EventTypes
from core.errors import GatewayError, InsufficientBalanceError, InvalidAmountError
from core.types import RedemptionStatus
from splitter.manager import Splitter

from tests.accounts import ONE_ETHER, OWNER, R1, R2, R3, SENDER

HALF_ETHER = ONE_ETHER // 2


@pytest_asyncio.fixture
async def funded(splitter: Splitter, gateway: MockValueGateway) -> Splitter:
    """R1/R2 50:50, 1 ether 입금 완료"""
    await splitter.add_recipient(OWNER, R1, 5000)
    await splitter.add_recipient(OWNER, R2, 5000)
    await gateway.send(SENDER, splitter, ONE_ETHER)
    return splitter


class TestWithdraw:
    """withdraw 테스트"""

    @pytest.mark.asyncio
    async def test_full_withdraw(self, funded: Splitter, gateway: MockValueGateway) -> None:
        """전액 지급"""
        receipt = await funded.withdraw(R1, HALF_ETHER)

        assert funded.balance_of(R1) == 0
        assert funded.state_of(R1) == "UNFUNDED"
        assert gateway.released_to(R1) == HALF_ETHER
        assert receipt.remaining_balance == 0

        events = funded.events(tx_id=receipt.tx_id)
        assert [(e.event_type, e.account, e.amount, e.source) for e in events] == [
            (EventTypes.BALANCE_REDEEM, R1, HALF_ETHER, "USER"),
        ]

    @pytest.mark.asyncio
    async def test_partial_withdraw(self, funded: Splitter) -> None:
        """부분 지급 후 잔고 = 이전 잔고 - 금액"""
        await funded.withdraw(R1, 1)

        assert funded.balance_of(R1) == HALF_ETHER - 1
        assert funded.state_of(R1) == "PARTIALLY_CREDITED"

    @pytest.mark.asyncio
    async def test_insufficient_balance(self, funded: Splitter, gateway: MockValueGateway) -> None:
        """잔고 초과 요청 거부, 잔고 유지"""
        with pytest.raises(InsufficientBalanceError):
            await funded.withdraw(R1, HALF_ETHER + 1)

        assert funded.balance_of(R1) == HALF_ETHER
        assert gateway.releases == []

    @pytest.mark.asyncio
    async def test_unknown_account(self, funded: Splitter) -> None:
        """잔고 없는 계정"""
        with pytest.raises(InsufficientBalanceError):
            await funded.withdraw(R3, 1)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("amount", [0, -1])
    async def test_invalid_amount(self, funded: Splitter, amount: int) -> None:
        """0 이하 금액"""
        with pytest.raises(InvalidAmountError):
            await funded.withdraw(R1, amount)

    @pytest.mark.asyncio
    async def test_gateway_failure_rolls_back(
        self,
        funded: Splitter,
        gateway: MockValueGateway,
    ) -> None:
        """지급 실패 시 차감 복구, 이벤트 없음"""
        gateway.fail_next("gateway offline")

        with pytest.raises(GatewayError, match="gateway offline"):
            await funded.withdraw(R1, HALF_ETHER)

        assert funded.balance_of(R1) == HALF_ETHER
        assert funded.state_of(R1) == "CREDITED"
        assert funded.events(event_type=EventTypes.BALANCE_REDEEM) == []
        assert funded.holdings().total_released == 0

    @pytest.mark.asyncio
    async def test_unexpected_gateway_exception_wrapped(self) -> None:
        """게이트웨이의 다른 예외도 GatewayError로 변환"""

        class BrokenGateway:
            async def release(self, account: str, amount: int) -> ReleaseReceipt:
                raise RuntimeError("socket closed")

        splitter = Splitter(owner=OWNER, gateway=BrokenGateway())
        await splitter.add_recipient(OWNER, R1, 10000)
        await splitter.receive(SENDER, 100)

        with pytest.raises(GatewayError) as exc_info:
            await splitter.withdraw(R1, 100)

        assert isinstance(exc_info.value.__cause__, RuntimeError)
        assert splitter.balance_of(R1) == 100

    @pytest.mark.asyncio
    async def test_cancelled_release_rolls_back(self) -> None:
        """응답 없는 지급이 취소되면 차감 복구"""

        class HangingGateway:
            def __init__(self) -> None:
                self.started = asyncio.Event()

            async def release(self, account: str, amount: int) -> ReleaseReceipt:
                self.started.set()
                await asyncio.Event().wait()
                raise AssertionError("unreachable")

        gateway = HangingGateway()
        splitter = Splitter(owner=OWNER, gateway=gateway)
        await splitter.add_recipient(OWNER, R1, 10000)
        await splitter.receive(SENDER, 100)

        task = asyncio.create_task(splitter.withdraw(R1, 100))
        await gateway.started.wait()
        assert splitter.balance_of(R1) == 0

        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

        assert splitter.balance_of(R1) == 100


class TestWithdrawReentrancy:
    """withdraw 재진입 테스트"""

    @pytest.mark.asyncio
    async def test_reentrant_withdraw_sees_debited_balance(
        self,
        funded: Splitter,
        gateway: MockValueGateway,
    ) -> None:
        """지급 도중 재호출은 차감된 잔고를 봄 (이중 지급 없음)"""
        nested_errors: list[Exception] = []

        async def hook(account: str, amount: int) -> None:
            if nested_errors:
                return
            try:
                await funded.withdraw(account, amount)
            except InsufficientBalanceError as e:
                nested_errors.append(e)

        gateway.on_release = hook

        await funded.withdraw(R1, HALF_ETHER)

        assert len(nested_errors) == 1
        assert gateway.released_to(R1) == HALF_ETHER
        assert funded.balance_of(R1) == 0

    @pytest.mark.asyncio
    async def test_reentrant_withdraw_of_remaining_balance(
        self,
        funded: Splitter,
        gateway: MockValueGateway,
    ) -> None:
        """재진입으로 남은 잔고만 추가 지급 가능"""
        calls: list[int] = []

        async def hook(account: str, amount: int) -> None:
            calls.append(amount)
            if len(calls) == 1:
                await funded.withdraw(account, funded.balance_of(account))

        gateway.on_release = hook

        await funded.withdraw(R1, HALF_ETHER // 2)

        assert gateway.released_to(R1) == HALF_ETHER
        assert funded.balance_of(R1) == 0
        # 재진입 호출은 별도 tx_id
        redeem_events = funded.events(account=R1, event_type=EventTypes.BALANCE_REDEEM)
        assert len(redeem_events) == 2
        assert redeem_events[0].correlation_id != redeem_events[1].correlation_id

    @pytest.mark.asyncio
    async def test_rollback_keeps_reentrant_deposit(
        self,
        funded: Splitter,
        gateway: MockValueGateway,
    ) -> None:
        """롤백은 자기 차감분만 복구 (재진입 입금 유지)"""

        async def hook(account: str, amount: int) -> None:
            await gateway.send(SENDER, funded, ONE_ETHER)
            raise RuntimeError("recipient rejected value")

        gateway.on_release = hook

        with pytest.raises(GatewayError):
            await funded.withdraw(R1, HALF_ETHER)

        assert funded.balance_of(R1) == ONE_ETHER
        assert funded.balance_of(R2) == ONE_ETHER
        assert funded.holdings().total_received == 2 * ONE_ETHER
        assert funded.holdings().total_released == 0


class TestTransferAll:
    """transfer_all 테스트"""

    @pytest.mark.asyncio
    async def test_pays_everyone(self, funded: Splitter, gateway: MockValueGateway) -> None:
        """모든 수령인 잔고 0"""
        result = await funded.transfer_all()

        assert result.all_succeeded
        assert [o.status for o in result.outcomes] == [RedemptionStatus.PAID] * 2
        assert result.total_released == ONE_ETHER
        assert funded.balance_of(R1) == 0
        assert funded.balance_of(R2) == 0
        assert gateway.released_to(R2) == HALF_ETHER

        events = funded.events(tx_id=result.tx_id)
        assert [(e.account, e.source) for e in events] == [(R1, "SYSTEM"), (R2, "SYSTEM")]

    @pytest.mark.asyncio
    async def test_fail_forward(self, funded: Splitter, gateway: MockValueGateway) -> None:
        """실패한 수령인만 복구, 나머지는 계속"""
        gateway.fail_for(R1, "R1 rejects")

        result = await funded.transfer_all()

        assert not result.all_succeeded
        assert [o.account for o in result.failed] == [R1]
        assert result.failed[0].reason == "R1 rejects"
        assert [o.account for o in result.paid] == [R2]
        assert funded.balance_of(R1) == HALF_ETHER
        assert funded.state_of(R1) == "CREDITED"
        assert funded.balance_of(R2) == 0

    @pytest.mark.asyncio
    async def test_skips_zero_balance(self, funded: Splitter) -> None:
        """잔고 0은 SKIPPED"""
        await funded.withdraw(R1, HALF_ETHER)

        result = await funded.transfer_all()

        assert [(o.account, o.status) for o in result.outcomes] == [
            (R1, RedemptionStatus.SKIPPED),
            (R2, RedemptionStatus.PAID),
        ]

    @pytest.mark.asyncio
    async def test_duplicate_recipient_paid_once(
        self,
        splitter: Splitter,
        gateway: MockValueGateway,
    ) -> None:
        """중복 등록 계정은 한 번만 처리"""
        await splitter.add_recipient(OWNER, R1, 3000)
        await splitter.add_recipient(OWNER, R1, 2000)
        await gateway.send(SENDER, splitter, 1000)

        result = await splitter.transfer_all()

        assert len(result.outcomes) == 1
        assert result.total_released == 500

    @pytest.mark.asyncio
    async def test_reentrant_transfer_all_no_double_spend(
        self,
        funded: Splitter,
        gateway: MockValueGateway,
    ) -> None:
        """지급 도중 transfer_all 재호출해도 총 지급액은 잔고 합계"""
        entered: list[bool] = []
        nested: list = []

        async def hook(account: str, amount: int) -> None:
            if entered:
                return
            entered.append(True)
            nested.append(await funded.transfer_all())

        gateway.on_release = hook

        result = await funded.transfer_all()

        inner = nested[0]
        assert [o.status for o in inner.outcomes] == [
            RedemptionStatus.SKIPPED,
            RedemptionStatus.PAID,
        ]
        assert [o.status for o in result.outcomes] == [
            RedemptionStatus.PAID,
            RedemptionStatus.SKIPPED,
        ]
        assert gateway.released_to(R1) + gateway.released_to(R2) == ONE_ETHER
        assert funded.holdings().total_released == ONE_ETHER

    @pytest.mark.asyncio
    async def test_empty_registry(self, splitter: Splitter) -> None:
        """수령인 없으면 빈 결과"""
        result = await splitter.transfer_all()

        assert result.outcomes == []
        assert result.all_succeeded
