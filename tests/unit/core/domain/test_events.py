"""
core/domain/events.py 테스트

Event 생성, EventTypes 검증
"""

from datetime import timezone

from core.domain.events import Event, EventTypes
from core.types import EntityKind, EventSource


class TestEventCreate:
    """Event.create 테스트"""

    def test_basic_creation(self) -> None:
        """기본 생성"""
        event = Event.create(
            event_type=EventTypes.BALANCE_DEPOSIT,
            source=EventSource.GATEWAY.value,
            account="0xabc",
            amount=500,
            correlation_id="tx-1",
            payload={"sender": "0xsender"},
        )

        assert event.event_type == "BalanceDeposit"
        assert event.source == "GATEWAY"
        assert event.entity_kind == EntityKind.ACCOUNT.value
        assert event.entity_id == "0xabc"
        assert event.correlation_id == "tx-1"
        assert event.payload == {"sender": "0xsender", "account": "0xabc", "amount": "500"}
        assert event.seq is None

    def test_auto_generated_fields(self) -> None:
        """자동 생성 필드 확인"""
        event = Event.create(
            event_type=EventTypes.BALANCE_REDEEM,
            source=EventSource.USER.value,
            account="0xabc",
            amount=1,
            correlation_id="tx-1",
        )

        # event_id는 UUID 형식
        assert len(event.event_id) == 36
        assert event.event_id.count("-") == 4
        assert event.ts.tzinfo == timezone.utc

    def test_large_amount_kept_exact(self) -> None:
        """MAX_VALUE 근처 금액도 손실 없음"""
        amount = 2**256 - 1
        event = Event.create(
            event_type=EventTypes.BALANCE_DEPOSIT,
            source=EventSource.GATEWAY.value,
            account="0xabc",
            amount=amount,
            correlation_id="tx-1",
        )

        assert event.amount == amount
        assert event.account == "0xabc"


class TestEventTypes:
    """EventTypes 테스트"""

    def test_all_types(self) -> None:
        """전체 타입 목록"""
        assert set(EventTypes.all_types()) == {"BalanceDeposit", "BalanceRedeem"}

    def test_is_valid_type(self) -> None:
        """타입 검증"""
        assert EventTypes.is_valid_type("BalanceDeposit")
        assert not EventTypes.is_valid_type("TradeExecuted")
