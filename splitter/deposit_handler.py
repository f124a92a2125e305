"""
입금 핸들러

인바운드 입금을 수령인 지분대로 잔고에 적립.

처리 순서:
1. 금액 검증
2. registry 순서대로 portion = amount * share // 10000 계산
3. 전체 합계 검증 후 잔고에 한 번에 반영
4. portion > 0인 수령인마다 BalanceDeposit 이벤트 기록

나눗셈 절사 잔여분과 미배정 지분은 적립되지 않고 인스턴스에 남음.
"""

import logging
import uuid

from core.constants import ShareLimits
from core.domain.events import Event, EventTypes
from core.ledger.balances import BalanceLedger, checked_mul, ensure_positive_amount
from core.ledger.registry import PercentageRegistry
from core.storage.event_log import EventLog
from core.types import EventSource
from splitter.models import DepositReceipt

logger = logging.getLogger(__name__)


class DepositSplitter:
    """입금 분배기

    Args:
        registry: 수령인 지분 목록
        ledger: 잔고 장부
        event_log: 이벤트 로그
    """

    def __init__(
        self,
        registry: PercentageRegistry,
        ledger: BalanceLedger,
        event_log: EventLog,
    ):
        self.registry = registry
        self.ledger = ledger
        self.event_log = event_log

    def split(self, amount: int) -> list[tuple[str, int]]:
        """지분별 분배액 계산 (상태 변경 없음)

        Returns:
            (account, portion) 목록 (registry 순서, 0 포함)

        Raises:
            LedgerOverflowError: amount * share가 MAX_VALUE를 넘는 경우
        """
        return [
            (recipient.account, checked_mul(amount, recipient.share) // ShareLimits.SCALE)
            for recipient in self.registry
        ]

    def on_deposit(self, sender: str, amount: int, tx_id: str | None = None) -> DepositReceipt:
        """입금 처리

        await 없이 한 번에 실행되므로 중간 상태가 관찰되지 않음.

        Args:
            sender: 송금 계정
            amount: 입금액 (양의 정수)
            tx_id: 최상위 호출 ID (없으면 생성)

        Returns:
            DepositReceipt

        Raises:
            InvalidAmountError: 금액 오류
            LedgerOverflowError: 분배 계산 또는 누적 오버플로우 (상태 변경 없음)
        """
        ensure_positive_amount(amount)
        tx_id = tx_id or str(uuid.uuid4())

        credits = [(account, portion) for account, portion in self.split(amount) if portion > 0]
        self.ledger.apply_deposit(amount, credits)

        for account, portion in credits:
            self.event_log.append(
                Event.create(
                    event_type=EventTypes.BALANCE_DEPOSIT,
                    source=EventSource.GATEWAY.value,
                    account=account,
                    amount=portion,
                    correlation_id=tx_id,
                    payload={"sender": sender},
                )
            )
            logger.debug(f"적립: {account} +{portion}", extra={"tx_id": tx_id})

        credited = sum(portion for _, portion in credits)
        logger.info(
            f"Deposit split: {amount} from {sender} to {len(credits)} recipients",
            extra={"tx_id": tx_id, "unattributed": amount - credited},
        )

        return DepositReceipt(
            tx_id=tx_id,
            sender=sender,
            amount=amount,
            credits=tuple(credits),
            unattributed=amount - credited,
        )
