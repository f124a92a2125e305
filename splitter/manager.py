"""
분배 원장 관리자

수령인 지분 목록, 잔고 장부, 입금 분배, 지급을 하나의 인스턴스로 묶음.
외부 호출(HTTP, 게이트웨이 콜백)은 모두 Splitter를 통해 들어옴.

원장 자체에는 락이 없음. 게이트웨이가 지급 도중 같은 인스턴스를 다시 호출할 수 있고
asyncio.Lock은 재진입을 허용하지 않기 때문. 메모리 상태 변경은 await 없이 이루어지므로
반쯤 적용된 상태는 관찰되지 않음.
저장(persist)만 별도 락으로 직렬화하며, 이 락은 게이트웨이 호출 동안 잡지 않음.
"""

import asyncio
import logging
import uuid

from adapters.interfaces import IValueGateway
from core.domain.events import Event
from core.errors import LedgerOverflowError, PersistenceError, UnauthorizedError
from core.ledger.balances import BalanceLedger
from core.ledger.registry import PercentageRegistry
from core.ledger.types import RecipientShare
from core.storage.event_log import EventLog
from core.storage.state_store import SplitterStateStore
from splitter.deposit_handler import DepositSplitter
from splitter.models import DepositReceipt, Holdings, TransferAllResult, WithdrawReceipt
from splitter.redemption import RedemptionService

logger = logging.getLogger(__name__)


class Splitter:
    """분배 원장

    Args:
        owner: 수령인 설정 권한을 가진 계정 (생성자)
        gateway: 가치 이전 게이트웨이
        store: 상태 저장소 (None이면 메모리 전용)

    사용 예시:
    ```python
    splitter = Splitter(owner="0xowner", gateway=gateway, store=store)
    await splitter.load()

    await splitter.add_recipient("0xowner", "0xr1", 5000)
    await splitter.add_recipient("0xowner", "0xr2", 5000)

    receipt = await splitter.receive("0xsender", 10**18)
    await splitter.withdraw("0xr1", splitter.balance_of("0xr1"))
    ```
    """

    def __init__(
        self,
        owner: str,
        gateway: IValueGateway,
        store: SplitterStateStore | None = None,
    ):
        self.owner = owner
        self.gateway = gateway
        self.store = store

        self.registry = PercentageRegistry()
        self.ledger = BalanceLedger()
        self.event_log = EventLog()

        self.deposit_splitter = DepositSplitter(
            registry=self.registry,
            ledger=self.ledger,
            event_log=self.event_log,
        )
        self.redemption = RedemptionService(
            registry=self.registry,
            ledger=self.ledger,
            gateway=gateway,
            event_log=self.event_log,
        )

        self._persist_lock = asyncio.Lock()
        self._persisted_seq = 0
        # 마지막 저장 실패 사유 (성공하면 None)
        self.persist_error: str | None = None

    # =========================================================================
    # 상태 로드/저장
    # =========================================================================

    async def load(self) -> None:
        """저장소에서 상태 복원 (저장소가 없으면 무시)"""
        if self.store is None:
            return

        state = await self.store.load()
        self.registry.restore(state.recipients)
        self.ledger.load(
            state.balances,
            state.total_received,
            state.total_released,
            states=state.states,
        )
        self.event_log.restore(state.events)
        self._persisted_seq = self.event_log.last_seq

        logger.info(
            "Splitter state loaded",
            extra={
                "recipients": len(self.registry),
                "accounts": len(state.balances),
                "events": len(self.event_log),
            },
        )

    async def _persist(self) -> None:
        """현재 메모리 상태 저장

        재진입 호출은 자기 상태를 저장하고, 바깥 호출은 끝난 뒤 다시 저장함.
        저장 실패는 호출자에게 전달하지 않음. 메모리 변경(입금 반영, 게이트웨이 지급)은
        이미 끝났으므로 persist_error에 기록하고, 저장되지 않은 이벤트는
        다음 저장 때 함께 기록됨.
        """
        if self.store is None:
            return

        async with self._persist_lock:
            pending = self.event_log.get_since(self._persisted_seq)
            try:
                await self.store.save(
                    recipients=self.registry.list_recipients(),
                    balances=self.ledger.snapshot(),
                    states=self.ledger.states(),
                    total_received=self.ledger.total_received,
                    total_released=self.ledger.total_released,
                    events=pending,
                )
            except PersistenceError as e:
                self.persist_error = str(e)
                logger.error(
                    f"Splitter state not persisted: {e}",
                    extra={"pending_events": len(pending)},
                )
                return

            self.persist_error = None
            if pending:
                self._persisted_seq = pending[-1].seq or self._persisted_seq

    # =========================================================================
    # 수령인 설정 (소유자 전용)
    # =========================================================================

    def _require_owner(self, caller: str, action: str) -> None:
        if caller != self.owner:
            logger.warning(f"Unauthorized {action} by {caller}")
            raise UnauthorizedError(caller, action)

    async def add_recipient(self, caller: str, account: str, share: int) -> RecipientShare:
        """수령인 추가

        Raises:
            UnauthorizedError: 소유자가 아닌 호출자
            ConfigurationError: 지분 합계 초과 또는 잘못된 값
        """
        self._require_owner(caller, "add recipients")
        recipient = self.registry.add_recipient(account, share)
        await self._persist()
        return recipient

    async def remove_all_recipients(self, caller: str) -> int:
        """수령인 전체 삭제 (잔고는 유지)

        Returns:
            삭제된 항목 수

        Raises:
            UnauthorizedError: 소유자가 아닌 호출자
        """
        self._require_owner(caller, "remove recipients")
        removed = self.registry.remove_all_recipients()
        await self._persist()
        return removed

    def get_recipients(self, as_of: str | None = None) -> list[RecipientShare]:
        """현재 수령인 목록 (as_of는 받기만 하고 사용하지 않음)"""
        return self.registry.list_recipients(as_of)

    # =========================================================================
    # 조회
    # =========================================================================

    def balance_of(self, account: str) -> int:
        return self.ledger.balance_of(account)

    def state_of(self, account: str) -> str:
        return self.ledger.state_of(account)

    def holdings(self) -> Holdings:
        """인스턴스 보유 현황"""
        return Holdings(
            total_received=self.ledger.total_received,
            total_released=self.ledger.total_released,
            total_balance=self.ledger.total_balance,
            unattributed=self.ledger.unattributed,
        )

    def events(
        self,
        tx_id: str | None = None,
        account: str | None = None,
        event_type: str | None = None,
    ) -> list[Event]:
        """이벤트 조회 (seq 순서)"""
        return self.event_log.query(tx_id=tx_id, account=account, event_type=event_type)

    # =========================================================================
    # 입금 / 지급
    # =========================================================================

    async def receive(self, sender: str, amount: int) -> DepositReceipt:
        """입금 콜백 (게이트웨이가 인바운드 전송마다 1회 호출)

        Raises:
            InvalidAmountError: 금액 오류
            LedgerOverflowError: 오버플로우 (상태 변경 없음)
        """
        tx_id = str(uuid.uuid4())
        try:
            receipt = self.deposit_splitter.on_deposit(sender, amount, tx_id)
        except LedgerOverflowError:
            logger.error(
                f"Deposit rejected by overflow: {amount} from {sender}",
                extra={"tx_id": tx_id},
            )
            raise

        await self._persist()
        return receipt

    async def withdraw(self, caller: str, amount: int) -> WithdrawReceipt:
        """호출자 잔고에서 지급

        실패 시에도 저장함 (재진입 호출이 차감 중인 상태를 저장했을 수 있음).

        Raises:
            InvalidAmountError: 금액 오류
            InsufficientBalanceError: 잔고 부족
            GatewayError: 지급 실패 (차감 복구됨)
        """
        try:
            return await self.redemption.withdraw(caller, amount, str(uuid.uuid4()))
        finally:
            await self._persist()

    async def transfer_all(self) -> TransferAllResult:
        """모든 수령인 잔고 일괄 지급 (누구나 호출 가능)"""
        try:
            return await self.redemption.transfer_all(str(uuid.uuid4()))
        finally:
            await self._persist()
