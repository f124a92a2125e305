"""
응답 스키마 (Pydantic)

Web API 응답 데이터 직렬화.
금액은 모두 10진수 문자열.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from core.domain.events import Event
from core.ledger.types import RecipientShare
from splitter.models import (
    DepositReceipt,
    Holdings,
    RedemptionOutcome,
    TransferAllResult,
    WithdrawReceipt,
)


class HealthResponse(BaseModel):
    """헬스 체크 응답"""

    status: str = Field(default="ok", description="서비스 상태")
    mode: str = Field(..., description="실행 모드 (testnet/production)")
    version: str = Field(..., description="버전")
    persist_error: str | None = Field(default=None, description="마지막 상태 저장 실패 사유")


class RecipientResponse(BaseModel):
    """수령인 응답"""

    account: str
    share: int

    @classmethod
    def from_share(cls, recipient: RecipientShare) -> "RecipientResponse":
        return cls(account=recipient.account, share=recipient.share)


class RecipientListResponse(BaseModel):
    """수령인 목록 응답"""

    recipients: list[RecipientResponse]
    total_share: int = Field(..., description="지분 합계 (basis point)")


class RemoveRecipientsResponse(BaseModel):
    """수령인 전체 삭제 응답"""

    removed: int


class BalanceResponse(BaseModel):
    """계정 잔고 응답"""

    account: str
    balance: str
    state: str


class CreditResponse(BaseModel):
    account: str
    amount: str


class DepositResponse(BaseModel):
    """입금 분배 응답"""

    tx_id: str
    sender: str
    amount: str
    credits: list[CreditResponse]
    unattributed: str

    @classmethod
    def from_receipt(cls, receipt: DepositReceipt) -> "DepositResponse":
        return cls(
            tx_id=receipt.tx_id,
            sender=receipt.sender,
            amount=str(receipt.amount),
            credits=[
                CreditResponse(account=account, amount=str(portion))
                for account, portion in receipt.credits
            ],
            unattributed=str(receipt.unattributed),
        )


class WithdrawResponse(BaseModel):
    """withdraw 응답"""

    tx_id: str
    account: str
    amount: str
    release_id: str
    remaining_balance: str

    @classmethod
    def from_receipt(cls, receipt: WithdrawReceipt) -> "WithdrawResponse":
        return cls(
            tx_id=receipt.tx_id,
            account=receipt.account,
            amount=str(receipt.amount),
            release_id=receipt.release_id,
            remaining_balance=str(receipt.remaining_balance),
        )


class OutcomeResponse(BaseModel):
    """일괄 지급 항목 응답"""

    account: str
    status: str
    amount: str
    release_id: str | None = None
    reason: str | None = None

    @classmethod
    def from_outcome(cls, outcome: RedemptionOutcome) -> "OutcomeResponse":
        return cls(
            account=outcome.account,
            status=outcome.status.value,
            amount=str(outcome.amount),
            release_id=outcome.release_id,
            reason=outcome.reason,
        )


class TransferAllResponse(BaseModel):
    """transfer_all 응답"""

    tx_id: str
    outcomes: list[OutcomeResponse]
    total_released: str
    all_succeeded: bool

    @classmethod
    def from_result(cls, result: TransferAllResult) -> "TransferAllResponse":
        return cls(
            tx_id=result.tx_id,
            outcomes=[OutcomeResponse.from_outcome(o) for o in result.outcomes],
            total_released=str(result.total_released),
            all_succeeded=result.all_succeeded,
        )


class EventResponse(BaseModel):
    """이벤트 응답"""

    seq: int | None = Field(default=None, description="이벤트 시퀀스")
    event_id: str = Field(..., description="이벤트 ID")
    event_type: str = Field(..., description="이벤트 타입")
    ts: datetime = Field(..., description="발생 시간 (UTC)")
    correlation_id: str = Field(..., description="최상위 호출 tx_id")
    source: str = Field(..., description="이벤트 출처")
    account: str = Field(..., description="대상 계정")
    amount: str = Field(..., description="변경 금액")
    payload: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_event(cls, event: Event) -> "EventResponse":
        return cls(
            seq=event.seq,
            event_id=event.event_id,
            event_type=event.event_type,
            ts=event.ts,
            correlation_id=event.correlation_id,
            source=event.source,
            account=event.account,
            amount=str(event.amount),
            payload=event.payload,
        )


class EventListResponse(BaseModel):
    """이벤트 목록 응답"""

    events: list[EventResponse]
    total: int


class HoldingsResponse(BaseModel):
    """인스턴스 보유 현황 응답"""

    total_received: str
    total_released: str
    total_balance: str
    unattributed: str

    @classmethod
    def from_holdings(cls, holdings: Holdings) -> "HoldingsResponse":
        return cls(
            total_received=str(holdings.total_received),
            total_released=str(holdings.total_released),
            total_balance=str(holdings.total_balance),
            unattributed=str(holdings.unattributed),
        )
