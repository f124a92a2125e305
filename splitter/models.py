"""
분배 원장 호출 결과 모델

최상위 호출(입금, withdraw, transfer_all)이 반환하는 영수증.
모든 영수증은 해당 호출의 tx_id를 포함하여 이벤트 조회에 사용 가능.
"""

from dataclasses import dataclass, field

from core.types import RedemptionStatus


@dataclass(frozen=True)
class DepositReceipt:
    """입금 분배 결과

    Attributes:
        tx_id: 최상위 호출 ID
        sender: 송금 계정
        amount: 입금액
        credits: (account, portion) 목록 (registry 순서, portion > 0)
        unattributed: 어떤 수령인에게도 적립되지 않은 금액
    """

    tx_id: str
    sender: str
    amount: int
    credits: tuple[tuple[str, int], ...] = ()
    unattributed: int = 0

    @property
    def credited(self) -> int:
        """적립된 총액"""
        return sum(portion for _, portion in self.credits)


@dataclass(frozen=True)
class WithdrawReceipt:
    """withdraw 결과"""

    tx_id: str
    account: str
    amount: int
    release_id: str
    remaining_balance: int


@dataclass(frozen=True)
class RedemptionOutcome:
    """일괄 지급 항목 결과

    Attributes:
        account: 수령 계정
        status: PAID / SKIPPED / FAILED
        amount: 지급(또는 지급 시도) 금액
        release_id: 게이트웨이 지급 ID (PAID일 때만)
        reason: 실패 사유 (FAILED일 때만)
    """

    account: str
    status: RedemptionStatus
    amount: int = 0
    release_id: str | None = None
    reason: str | None = None


@dataclass
class TransferAllResult:
    """transfer_all 결과 (fail-forward)"""

    tx_id: str
    outcomes: list[RedemptionOutcome] = field(default_factory=list)

    @property
    def paid(self) -> list[RedemptionOutcome]:
        return [o for o in self.outcomes if o.status == RedemptionStatus.PAID]

    @property
    def failed(self) -> list[RedemptionOutcome]:
        return [o for o in self.outcomes if o.status == RedemptionStatus.FAILED]

    @property
    def total_released(self) -> int:
        """이번 호출에서 지급된 총액"""
        return sum(o.amount for o in self.paid)

    @property
    def all_succeeded(self) -> bool:
        return not self.failed


@dataclass(frozen=True)
class Holdings:
    """인스턴스 보유 현황

    unattributed = total_received - total_released - total_balance
    """

    total_received: int
    total_released: int
    total_balance: int
    unattributed: int
