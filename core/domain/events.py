"""
Event 도메인 모델

잔고 변경은 모두 Event로 기록됨 (append-only)
- BalanceDeposit: 입금 분배로 수령인 잔고 증가
- BalanceRedeem: 지급으로 수령인 잔고 감소
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any
from uuid import uuid4

from core.types import EntityKind


@dataclass
class Event:
    """이벤트

    잔고 변경을 기록하는 데이터 구조.
    correlation_id는 이벤트를 발생시킨 최상위 호출의 tx_id.
    """

    event_id: str
    event_type: str
    ts: datetime
    correlation_id: str
    source: str
    entity_kind: str
    entity_id: str
    payload: dict[str, Any]
    seq: int | None = None  # EventLog 추가 시 할당되는 시퀀스 번호

    @staticmethod
    def create(
        event_type: str,
        source: str,
        account: str,
        amount: int,
        correlation_id: str,
        payload: dict[str, Any] | None = None,
    ) -> "Event":
        """새 잔고 이벤트 생성

        Args:
            event_type: 이벤트 타입 (BalanceDeposit, BalanceRedeem)
            source: 이벤트 출처 (GATEWAY, USER, SYSTEM)
            account: 대상 계정
            amount: 변경 금액 (정수, 최소 단위)
            correlation_id: 최상위 호출의 tx_id
            payload: 추가 데이터 (account/amount는 자동 포함)

        Returns:
            새 Event 인스턴스
        """
        body: dict[str, Any] = dict(payload or {})
        # 금액은 JSON 정밀도 손실 방지를 위해 문자열로 저장
        body["account"] = account
        body["amount"] = str(amount)

        return Event(
            event_id=str(uuid4()),
            event_type=event_type,
            ts=datetime.now(timezone.utc),
            correlation_id=correlation_id,
            source=source,
            entity_kind=EntityKind.ACCOUNT.value,
            entity_id=account,
            payload=body,
        )

    @property
    def account(self) -> str:
        """대상 계정"""
        return self.payload["account"]

    @property
    def amount(self) -> int:
        """변경 금액"""
        return int(self.payload["amount"])


class EventTypes:
    """Event Type 상수"""

    BALANCE_DEPOSIT: str = "BalanceDeposit"
    BALANCE_REDEEM: str = "BalanceRedeem"

    @classmethod
    def all_types(cls) -> list[str]:
        """모든 이벤트 타입 목록 반환"""
        return [
            value
            for name, value in vars(cls).items()
            if not name.startswith("_") and isinstance(value, str) and name.isupper()
        ]

    @classmethod
    def is_valid_type(cls, event_type: str) -> bool:
        """유효한 이벤트 타입인지 확인"""
        return event_type in cls.all_types()
