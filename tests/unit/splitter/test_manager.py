"""
splitter/manager.py 테스트

Splitter 공개 연산, 소유자 권한, 대표 시나리오, 영속화 검증
"""

import pytest

from adapters.db.sqlite_adapter import SQLiteAdapter
from adapters.mock.gateway import MockValueGateway
from core.constants import ValueLimits
from core.domain.events import EventTypes
from core.errors import (
    ConfigurationError,
    GatewayError,
    LedgerOverflowError,
    PersistenceError,
    UnauthorizedError,
)
from core.ledger.types import RecipientShare
from core.storage.state_store import SplitterStateStore
from splitter.manager import Splitter

from tests.accounts import ONE_ETHER, OWNER, R1, R2, R3, SENDER


class FlakyStateStore(SplitterStateStore):
    """fail=True인 동안 save가 실패하는 저장소"""

    def __init__(self, db: SQLiteAdapter):
        super().__init__(db)
        self.fail = False

    async def save(self, *args: object, **kwargs: object) -> None:
        if self.fail:
            raise PersistenceError("disk I/O error")
        await super().save(*args, **kwargs)


class TestRecipients:
    """수령인 설정 테스트"""

    @pytest.mark.asyncio
    async def test_owner_adds_recipients(self, splitter: Splitter) -> None:
        """소유자 추가"""
        await splitter.add_recipient(OWNER, R1, 5000)
        await splitter.add_recipient(OWNER, R2, 5000)

        assert splitter.get_recipients() == [RecipientShare(R1, 5000), RecipientShare(R2, 5000)]

    @pytest.mark.asyncio
    async def test_non_owner_rejected(self, splitter: Splitter) -> None:
        """소유자가 아니면 거부"""
        with pytest.raises(UnauthorizedError):
            await splitter.add_recipient(R1, R1, 5000)
        with pytest.raises(UnauthorizedError):
            await splitter.remove_all_recipients(R1)

        assert splitter.get_recipients() == []

    @pytest.mark.asyncio
    async def test_three_way_half_shares(self, splitter: Splitter) -> None:
        """5000 세 번째 추가는 실패하고 R1, R2 유지"""
        await splitter.add_recipient(OWNER, R1, 5000)
        await splitter.add_recipient(OWNER, R2, 5000)

        with pytest.raises(ConfigurationError, match="greater than 100%"):
            await splitter.add_recipient(OWNER, R3, 5000)

        assert [r.account for r in splitter.get_recipients()] == [R1, R2]

    @pytest.mark.asyncio
    async def test_remove_all_keeps_balances(
        self,
        splitter: Splitter,
        gateway: MockValueGateway,
    ) -> None:
        """전체 삭제 후에도 적립 잔고 유지, 이후 입금은 미배정"""
        await splitter.add_recipient(OWNER, R1, 10000)
        await gateway.send(SENDER, splitter, 100)

        assert await splitter.remove_all_recipients(OWNER) == 1
        assert splitter.get_recipients() == []
        assert splitter.balance_of(R1) == 100

        receipt = await gateway.send(SENDER, splitter, 50)
        assert receipt.unattributed == 50
        assert splitter.balance_of(R1) == 100

        # 삭제된 수령인도 직접 withdraw 가능
        await splitter.withdraw(R1, 100)
        assert gateway.released_to(R1) == 100

    @pytest.mark.asyncio
    async def test_as_of_ignored(self, splitter: Splitter) -> None:
        """as_of 값과 관계없이 같은 목록"""
        await splitter.add_recipient(OWNER, R1, 100)

        assert splitter.get_recipients(as_of=R2) == splitter.get_recipients()


class TestScenarios:
    """대표 시나리오"""

    @pytest.mark.asyncio
    async def test_half_split_one_ether(
        self,
        splitter: Splitter,
        gateway: MockValueGateway,
    ) -> None:
        """R1/R2 50:50, 1 ether 입금 후 각자 0.5 ether"""
        await splitter.add_recipient(OWNER, R1, 5000)
        await splitter.add_recipient(OWNER, R2, 5000)

        receipt = await gateway.send(SENDER, splitter, ONE_ETHER)

        assert splitter.balance_of(R1) == ONE_ETHER // 2
        assert splitter.balance_of(R2) == ONE_ETHER // 2
        assert gateway.custody == ONE_ETHER

        deposit_events = splitter.events(tx_id=receipt.tx_id)
        assert [(e.event_type, e.account, e.amount) for e in deposit_events] == [
            (EventTypes.BALANCE_DEPOSIT, R1, ONE_ETHER // 2),
            (EventTypes.BALANCE_DEPOSIT, R2, ONE_ETHER // 2),
        ]

        withdraw = await splitter.withdraw(R1, ONE_ETHER // 2)

        assert splitter.balance_of(R1) == 0
        assert gateway.holdings_of(R1) == ONE_ETHER // 2
        assert [e.event_type for e in splitter.events(tx_id=withdraw.tx_id)] == [
            EventTypes.BALANCE_REDEEM,
        ]

    @pytest.mark.asyncio
    async def test_holdings_invariant(
        self,
        splitter: Splitter,
        gateway: MockValueGateway,
    ) -> None:
        """잔고 합계 <= 총 입금 - 총 지급"""
        await splitter.add_recipient(OWNER, R1, 3333)
        await splitter.add_recipient(OWNER, R2, 3333)

        for amount in (7, 1000, 12345, ONE_ETHER):
            await gateway.send(SENDER, splitter, amount)
        await splitter.withdraw(R1, 1)
        await splitter.transfer_all()

        holdings = splitter.holdings()
        assert holdings.total_balance <= holdings.total_received - holdings.total_released
        assert holdings.unattributed == gateway.custody

    @pytest.mark.asyncio
    async def test_overflow_rejected_without_state_change(
        self,
        splitter: Splitter,
        gateway: MockValueGateway,
    ) -> None:
        """오버플로우 입금은 전체 거부"""
        await splitter.add_recipient(OWNER, R1, 10000)
        gateway.set_holdings(SENDER, ValueLimits.MAX_VALUE)

        with pytest.raises(LedgerOverflowError):
            await gateway.send(SENDER, splitter, ValueLimits.MAX_VALUE)

        assert splitter.balance_of(R1) == 0
        assert splitter.holdings().total_received == 0
        assert splitter.events() == []
        assert gateway.holdings_of(SENDER) == ValueLimits.MAX_VALUE


class TestPersistence:
    """영속화 테스트"""

    @pytest.mark.asyncio
    async def test_state_survives_reload(
        self,
        persistent_splitter: Splitter,
        gateway: MockValueGateway,
        memory_db: SQLiteAdapter,
    ) -> None:
        """저장 후 새 인스턴스에서 동일 상태"""
        await persistent_splitter.add_recipient(OWNER, R1, 6000)
        await persistent_splitter.add_recipient(OWNER, R2, 3000)
        deposit = await gateway.send(SENDER, persistent_splitter, ONE_ETHER)
        await persistent_splitter.withdraw(R1, 1)

        reloaded = Splitter(owner=OWNER, gateway=gateway, store=SplitterStateStore(memory_db))
        await reloaded.load()

        assert reloaded.get_recipients() == persistent_splitter.get_recipients()
        assert reloaded.balance_of(R1) == persistent_splitter.balance_of(R1)
        assert reloaded.balance_of(R2) == persistent_splitter.balance_of(R2)
        assert reloaded.holdings() == persistent_splitter.holdings()
        assert len(reloaded.events(tx_id=deposit.tx_id)) == 2
        assert len(reloaded.events()) == 3

    @pytest.mark.asyncio
    async def test_failed_withdraw_persists_restored_balance(
        self,
        persistent_splitter: Splitter,
        gateway: MockValueGateway,
        memory_db: SQLiteAdapter,
    ) -> None:
        """지급 실패 후 저장된 잔고도 복구된 값"""
        await persistent_splitter.add_recipient(OWNER, R1, 10000)
        await gateway.send(SENDER, persistent_splitter, 100)
        gateway.fail_next()

        with pytest.raises(GatewayError):
            await persistent_splitter.withdraw(R1, 100)

        state = await SplitterStateStore(memory_db).load()
        assert state.balances == {R1: 100}

    @pytest.mark.asyncio
    async def test_new_events_appended_after_reload(
        self,
        persistent_splitter: Splitter,
        gateway: MockValueGateway,
        memory_db: SQLiteAdapter,
    ) -> None:
        """로드 후 seq 이어서 저장"""
        await persistent_splitter.add_recipient(OWNER, R1, 10000)
        await gateway.send(SENDER, persistent_splitter, 100)

        reloaded = Splitter(owner=OWNER, gateway=gateway, store=SplitterStateStore(memory_db))
        await reloaded.load()
        await gateway.send(SENDER, reloaded, 100)

        state = await SplitterStateStore(memory_db).load()
        assert [e.seq for e in state.events] == [1, 2]
        assert state.balances == {R1: 200}

    @pytest.mark.asyncio
    async def test_save_failure_keeps_deposit_with_custody(
        self,
        gateway: MockValueGateway,
        memory_db: SQLiteAdapter,
    ) -> None:
        """저장 실패해도 입금은 성공, 게이트웨이 보관액과 일치"""
        store = FlakyStateStore(memory_db)
        splitter = Splitter(owner=OWNER, gateway=gateway, store=store)
        await splitter.add_recipient(OWNER, R1, 10000)
        store.fail = True

        receipt = await gateway.send(SENDER, splitter, 100)

        assert receipt.credited == 100
        assert gateway.custody == 100
        assert splitter.holdings().total_received == gateway.custody
        assert splitter.persist_error is not None
        assert (await SplitterStateStore(memory_db).load()).balances == {}

    @pytest.mark.asyncio
    async def test_save_failure_after_release_returns_receipt(
        self,
        gateway: MockValueGateway,
        memory_db: SQLiteAdapter,
    ) -> None:
        """지급 후 저장 실패는 지급 결과를 바꾸지 않음"""
        store = FlakyStateStore(memory_db)
        splitter = Splitter(owner=OWNER, gateway=gateway, store=store)
        await splitter.add_recipient(OWNER, R1, 10000)
        await gateway.send(SENDER, splitter, 100)
        store.fail = True

        receipt = await splitter.withdraw(R1, 60)
        result = await splitter.transfer_all()

        assert receipt.remaining_balance == 40
        assert result.total_released == 40
        assert gateway.released_to(R1) == 100
        assert splitter.holdings().total_released == 100

    @pytest.mark.asyncio
    async def test_pending_changes_saved_after_recovery(
        self,
        gateway: MockValueGateway,
        memory_db: SQLiteAdapter,
    ) -> None:
        """저장 복구 후 밀린 이벤트와 잔고를 함께 저장"""
        store = FlakyStateStore(memory_db)
        splitter = Splitter(owner=OWNER, gateway=gateway, store=store)
        await splitter.add_recipient(OWNER, R1, 10000)
        store.fail = True
        await gateway.send(SENDER, splitter, 100)

        store.fail = False
        await gateway.send(SENDER, splitter, 50)

        state = await SplitterStateStore(memory_db).load()
        assert splitter.persist_error is None
        assert state.balances == {R1: 150}
        assert state.total_received == 150
        assert [e.seq for e in state.events] == [1, 2]
