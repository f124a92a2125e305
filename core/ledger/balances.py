"""
BalanceLedger - 계정별 적립 잔고

입금 분배로만 증가하고 지급으로만 감소하는 잔고 장부.
인스턴스 총 입금액/총 지급액을 함께 추적하여
sum(잔고) <= 총 입금 - 총 지급 불변식을 유지.
"""

import logging
from typing import Iterable, Mapping

from core.constants import ValueLimits
from core.domain.state_machines import BalanceState, BalanceStateMachine
from core.errors import InsufficientBalanceError, InvalidAmountError, LedgerOverflowError

logger = logging.getLogger(__name__)


def ensure_positive_amount(amount: object) -> int:
    """금액 검증 (양의 정수)

    Raises:
        InvalidAmountError: bool, 정수가 아닌 값, 0 이하
    """
    if isinstance(amount, bool) or not isinstance(amount, int) or amount <= 0:
        raise InvalidAmountError(amount)
    return amount


def checked_add(a: int, b: int) -> int:
    """MAX_VALUE 범위 덧셈

    Raises:
        LedgerOverflowError: 결과가 MAX_VALUE를 넘는 경우
    """
    result = a + b
    if result > ValueLimits.MAX_VALUE:
        raise LedgerOverflowError(f"Addition overflow: {a} + {b}")
    return result


def checked_mul(a: int, b: int) -> int:
    """MAX_VALUE 범위 곱셈

    Raises:
        LedgerOverflowError: 결과가 MAX_VALUE를 넘는 경우
    """
    result = a * b
    if result > ValueLimits.MAX_VALUE:
        raise LedgerOverflowError(f"Multiplication overflow: {a} * {b}")
    return result


class BalanceLedger:
    """잔고 장부

    계정 → 잔고(0 이상 정수) 매핑. 항목은 최초 적립 시 생성되고 삭제되지 않음.
    빈 장부로 시작하며 DB 로드는 load() 사용.
    """

    def __init__(self) -> None:
        self._balances: dict[str, int] = {}
        self._states: dict[str, BalanceStateMachine] = {}
        self._total_received = 0
        self._total_released = 0

    # -------------------------------------------------------------------------
    # 조회
    # -------------------------------------------------------------------------

    def balance_of(self, account: str) -> int:
        """계정 잔고 (미등록 계정은 0)"""
        return self._balances.get(account, 0)

    def state_of(self, account: str) -> str:
        """계정 잔고 상태"""
        machine = self._states.get(account)
        return machine.state if machine else BalanceState.UNFUNDED.value

    def accounts(self) -> list[str]:
        """적립 이력이 있는 계정 목록"""
        return list(self._balances)

    def snapshot(self) -> dict[str, int]:
        """잔고 복사본"""
        return dict(self._balances)

    def states(self) -> dict[str, str]:
        """계정별 잔고 상태 복사본"""
        return {account: machine.state for account, machine in self._states.items()}

    @property
    def total_balance(self) -> int:
        """전체 미지급 잔고 합계"""
        return sum(self._balances.values())

    @property
    def total_received(self) -> int:
        """총 입금액"""
        return self._total_received

    @property
    def total_released(self) -> int:
        """총 지급액"""
        return self._total_released

    @property
    def unattributed(self) -> int:
        """어떤 계정에도 적립되지 않은 보유액 (절사 잔여분, 미배정 지분)"""
        return self._total_received - self._total_released - self.total_balance

    # -------------------------------------------------------------------------
    # 입금
    # -------------------------------------------------------------------------

    def apply_deposit(self, amount: int, credits: Iterable[tuple[str, int]]) -> None:
        """입금 반영

        모든 합계를 먼저 계산/검증한 뒤 한 번에 반영.
        오버플로우 시 어떤 값도 변경되지 않음.

        Args:
            amount: 인바운드 입금액
            credits: (account, portion) 목록 (portion > 0)

        Raises:
            LedgerOverflowError: 총 입금액 또는 계정 잔고가 MAX_VALUE를 넘는 경우
        """
        new_total = checked_add(self._total_received, amount)

        new_balances: dict[str, int] = {}
        for account, portion in credits:
            current = new_balances.get(account, self.balance_of(account))
            new_balances[account] = checked_add(current, portion)

        # 검증 완료 후 반영
        self._total_received = new_total
        for account, balance in new_balances.items():
            self._balances[account] = balance
            self._machine(account).transition(BalanceState.CREDITED)

    # -------------------------------------------------------------------------
    # 지급
    # -------------------------------------------------------------------------

    def debit(self, account: str, amount: int) -> str:
        """잔고 차감 (외부 지급 전에 호출)

        Args:
            account: 대상 계정
            amount: 차감 금액

        Returns:
            차감 전 상태 (롤백 시 사용)

        Raises:
            InsufficientBalanceError: 잔고보다 큰 금액
        """
        available = self.balance_of(account)
        if amount > available:
            raise InsufficientBalanceError(account, amount, available)

        machine = self._machine(account)
        previous_state = machine.state

        remaining = available - amount
        self._balances[account] = remaining
        machine.transition(
            BalanceState.UNFUNDED if remaining == 0 else BalanceState.PARTIALLY_CREDITED
        )

        logger.debug(f"잔고 차감: {account} -{amount} (잔여 {remaining})")
        return previous_state

    def restore(self, account: str, amount: int, previous_state: str) -> None:
        """차감 롤백 (외부 지급 실패 시)

        해당 호출이 차감한 금액만 다시 더함. 재진입 호출의 효과는 유지됨.

        Args:
            account: 대상 계정
            amount: 복구 금액
            previous_state: debit()이 반환한 차감 전 상태

        Raises:
            LedgerOverflowError: 복구한 잔고가 MAX_VALUE를 넘는 경우
        """
        self._balances[account] = checked_add(self.balance_of(account), amount)
        self._machine(account).force_state(previous_state)

        logger.debug(f"잔고 복구: {account} +{amount}")

    def record_release(self, amount: int) -> None:
        """외부 지급 완료 기록"""
        self._total_released += amount

    # -------------------------------------------------------------------------
    # 영속화
    # -------------------------------------------------------------------------

    def load(
        self,
        balances: Mapping[str, int],
        total_received: int,
        total_released: int,
        states: Mapping[str, str] | None = None,
    ) -> None:
        """저장된 상태로 교체 (DB 로드용)

        저장된 상태는 잔고와 맞을 때만 사용. 잔고 0은 UNFUNDED,
        잔고가 있는데 저장 상태가 없거나 UNFUNDED면 CREDITED.

        Raises:
            ValueError: 음수 잔고 또는 불변식 위반
        """
        if any(value < 0 for value in balances.values()):
            raise ValueError("Persisted balances must be non-negative")
        if sum(balances.values()) > total_received - total_released:
            raise ValueError(
                "Persisted balances exceed received minus released value"
            )

        self._balances = dict(balances)
        self._states = {
            account: BalanceStateMachine(account, _loaded_state(value, (states or {}).get(account)))
            for account, value in self._balances.items()
        }
        self._total_received = total_received
        self._total_released = total_released

    def _machine(self, account: str) -> BalanceStateMachine:
        machine = self._states.get(account)
        if machine is None:
            machine = BalanceStateMachine(account)
            self._states[account] = machine
        return machine


def _loaded_state(balance: int, stored: str | None) -> BalanceState:
    if balance == 0:
        return BalanceState.UNFUNDED
    if stored == BalanceState.PARTIALLY_CREDITED.value:
        return BalanceState.PARTIALLY_CREDITED
    return BalanceState.CREDITED
