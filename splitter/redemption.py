"""
지급 핸들러

적립 잔고를 게이트웨이를 통해 수령 계정으로 지급.

모든 지급 경로는 게이트웨이 호출 전에 잔고를 먼저 차감.
게이트웨이가 지급 도중 원장을 다시 호출(재진입)해도 차감된 잔고만 보이므로
같은 잔고가 두 번 지급되지 않음.
지급 실패 시 해당 호출이 차감한 금액만 되돌림.
"""

import asyncio
import logging
import uuid

from adapters.interfaces import IValueGateway
from adapters.models import ReleaseReceipt
from core.domain.events import Event, EventTypes
from core.errors import GatewayError
from core.ledger.balances import BalanceLedger, ensure_positive_amount
from core.ledger.registry import PercentageRegistry
from core.storage.event_log import EventLog
from core.types import EventSource, RedemptionStatus
from splitter.models import RedemptionOutcome, TransferAllResult, WithdrawReceipt

logger = logging.getLogger(__name__)


class RedemptionService:
    """지급 서비스

    Args:
        registry: 수령인 지분 목록 (transfer_all 대상)
        ledger: 잔고 장부
        gateway: 가치 이전 게이트웨이
        event_log: 이벤트 로그
    """

    def __init__(
        self,
        registry: PercentageRegistry,
        ledger: BalanceLedger,
        gateway: IValueGateway,
        event_log: EventLog,
    ):
        self.registry = registry
        self.ledger = ledger
        self.gateway = gateway
        self.event_log = event_log

    async def withdraw(self, caller: str, amount: int, tx_id: str | None = None) -> WithdrawReceipt:
        """호출자 잔고에서 지급

        Args:
            caller: 호출 계정 (지급 대상)
            amount: 지급 금액 (양의 정수)
            tx_id: 최상위 호출 ID (없으면 생성)

        Returns:
            WithdrawReceipt

        Raises:
            InvalidAmountError: 금액 오류
            InsufficientBalanceError: 잔고 부족 (잔고 변경 없음)
            GatewayError: 지급 실패 (차감 복구됨, 이벤트 없음)
        """
        ensure_positive_amount(amount)
        tx_id = tx_id or str(uuid.uuid4())

        release = await self._debit_and_release(caller, amount, tx_id)
        self._record(caller, amount, release, tx_id, EventSource.USER)

        remaining = self.ledger.balance_of(caller)
        logger.info(
            f"Withdraw: {amount} to {caller}",
            extra={"tx_id": tx_id, "release_id": release.release_id, "remaining": remaining},
        )

        return WithdrawReceipt(
            tx_id=tx_id,
            account=caller,
            amount=amount,
            release_id=release.release_id,
            remaining_balance=remaining,
        )

    async def transfer_all(self, tx_id: str | None = None) -> TransferAllResult:
        """모든 수령인 잔고 일괄 지급 (fail-forward)

        registry의 서로 다른 계정을 순서대로 처리.
        잔고는 항목마다 새로 읽으므로 앞선 지급 중 재진입으로 바뀐 값이 반영됨.
        실패한 수령인만 복구하고 나머지는 계속 진행하며, 이미 지급된 건은 되돌리지 않음.

        Returns:
            TransferAllResult (항목별 PAID / SKIPPED / FAILED)
        """
        tx_id = tx_id or str(uuid.uuid4())
        result = TransferAllResult(tx_id=tx_id)

        for account in self.registry.accounts():
            balance = self.ledger.balance_of(account)
            if balance == 0:
                result.outcomes.append(
                    RedemptionOutcome(account=account, status=RedemptionStatus.SKIPPED)
                )
                continue

            try:
                release = await self._debit_and_release(account, balance, tx_id)
            except GatewayError as e:
                result.outcomes.append(
                    RedemptionOutcome(
                        account=account,
                        status=RedemptionStatus.FAILED,
                        amount=balance,
                        reason=e.reason,
                    )
                )
                continue

            self._record(account, balance, release, tx_id, EventSource.SYSTEM)
            result.outcomes.append(
                RedemptionOutcome(
                    account=account,
                    status=RedemptionStatus.PAID,
                    amount=balance,
                    release_id=release.release_id,
                )
            )

        logger.info(
            f"Transfer all: {len(result.paid)} paid, {len(result.failed)} failed",
            extra={"tx_id": tx_id, "total_released": result.total_released},
        )
        return result

    async def _debit_and_release(self, account: str, amount: int, tx_id: str) -> ReleaseReceipt:
        """차감 후 게이트웨이 지급, 실패 시 이 호출의 차감만 복구

        Raises:
            InsufficientBalanceError: 잔고 부족
            GatewayError: 지급 실패 (게이트웨이가 던진 다른 예외도 GatewayError로 변환)
        """
        previous_state = self.ledger.debit(account, amount)

        try:
            return await self.gateway.release(account, amount)
        except GatewayError as e:
            self._rollback(account, amount, previous_state, tx_id, e.reason)
            raise
        except asyncio.CancelledError:
            self._rollback(account, amount, previous_state, tx_id, "cancelled")
            raise
        except Exception as e:
            self._rollback(account, amount, previous_state, tx_id, str(e))
            raise GatewayError(account, amount, str(e)) from e

    def _rollback(
        self,
        account: str,
        amount: int,
        previous_state: str,
        tx_id: str,
        reason: str,
    ) -> None:
        self.ledger.restore(account, amount, previous_state)
        logger.warning(
            f"Release failed, balance restored: {amount} to {account}",
            extra={"tx_id": tx_id, "reason": reason},
        )

    def _record(
        self,
        account: str,
        amount: int,
        release: ReleaseReceipt,
        tx_id: str,
        source: EventSource,
    ) -> None:
        self.ledger.record_release(amount)
        self.event_log.append(
            Event.create(
                event_type=EventTypes.BALANCE_REDEEM,
                source=source.value,
                account=account,
                amount=amount,
                correlation_id=tx_id,
                payload={"release_id": release.release_id},
            )
        )
