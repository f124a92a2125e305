"""
State Machines

계정별 잔고 상태 전이 관리.
"""

import logging
from enum import Enum

logger = logging.getLogger(__name__)


class StateMachineError(Exception):
    """상태 전이 오류"""
    pass


class BalanceState(str, Enum):
    """계정 잔고 상태

    전이 규칙:
    - UNFUNDED → CREDITED: 입금 분배
    - CREDITED → CREDITED: 추가 입금
    - CREDITED → UNFUNDED: 전액 지급
    - CREDITED → PARTIALLY_CREDITED: 일부 withdraw
    - PARTIALLY_CREDITED → PARTIALLY_CREDITED: 추가 일부 withdraw
    - PARTIALLY_CREDITED → UNFUNDED: 잔여 전액 지급
    - PARTIALLY_CREDITED → CREDITED: 추가 입금
    """
    UNFUNDED = "UNFUNDED"
    CREDITED = "CREDITED"
    PARTIALLY_CREDITED = "PARTIALLY_CREDITED"


class StateMachine:
    """상태 머신 기본 클래스

    Args:
        initial_state: 초기 상태
        transitions: 허용된 전이 정의 {from_state: [to_states]}
        name: 머신 이름 (로깅용)
    """

    def __init__(
        self,
        initial_state: str | Enum,
        transitions: dict[str, list[str]],
        name: str = "StateMachine",
    ):
        self._state = initial_state.value if isinstance(initial_state, Enum) else initial_state
        self._transitions = transitions
        self._name = name

    @property
    def state(self) -> str:
        """현재 상태"""
        return self._state

    def can_transition(self, to_state: str | Enum) -> bool:
        """전이 가능 여부 확인"""
        target = to_state.value if isinstance(to_state, Enum) else to_state
        allowed = self._transitions.get(self._state, [])
        return target in allowed

    def transition(self, to_state: str | Enum) -> str:
        """상태 전이

        Args:
            to_state: 목표 상태

        Returns:
            새 상태

        Raises:
            StateMachineError: 허용되지 않은 전이
        """
        target = to_state.value if isinstance(to_state, Enum) else to_state

        if not self.can_transition(target):
            allowed = self._transitions.get(self._state, [])
            raise StateMachineError(
                f"{self._name}: Cannot transition from {self._state} to {target}. "
                f"Allowed: {allowed}"
            )

        old_state = self._state
        self._state = target

        logger.debug(f"{self._name}: {old_state} → {target}")

        return target

    def force_state(self, state: str | Enum) -> None:
        """강제 상태 설정 (롤백/복구용)

        Args:
            state: 새 상태
        """
        target = state.value if isinstance(state, Enum) else state
        old_state = self._state
        self._state = target

        logger.debug(f"{self._name}: Force state {old_state} → {target}")


class BalanceStateMachine(StateMachine):
    """계정 잔고 상태 머신"""

    TRANSITIONS: dict[str, list[str]] = {
        "UNFUNDED": ["CREDITED"],
        "CREDITED": ["CREDITED", "UNFUNDED", "PARTIALLY_CREDITED"],
        "PARTIALLY_CREDITED": ["PARTIALLY_CREDITED", "UNFUNDED", "CREDITED"],
    }

    def __init__(
        self,
        account: str,
        initial_state: str | BalanceState = BalanceState.UNFUNDED,
    ):
        super().__init__(
            initial_state=initial_state,
            transitions=self.TRANSITIONS,
            name=f"BalanceStateMachine[{account}]",
        )
