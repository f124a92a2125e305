"""
도메인 예외 정의

분배 원장에서 발생하는 모든 오류는 SplitterError를 상속.
호출자에게 동기적으로 전달되며, 재시도 여부는 호출자가 결정.
"""


class SplitterError(Exception):
    """분배 원장 기본 예외"""
    pass


class ConfigurationError(SplitterError):
    """수령인 설정 오류

    지분 합계가 100%를 넘거나 지분/계정 값이 유효하지 않을 때 발생.
    """
    pass


class UnauthorizedError(SplitterError):
    """권한 없음

    소유자가 아닌 계정이 수령인 설정을 변경하려 할 때 발생.
    """

    def __init__(self, caller: str, action: str):
        self.caller = caller
        self.action = action
        super().__init__(f"{caller} is not allowed to {action}")


class InvalidAmountError(SplitterError, ValueError):
    """금액 오류 (0 이하 또는 정수가 아닌 값)"""

    def __init__(self, amount: object):
        self.amount = amount
        super().__init__(f"Amount must be a positive integer, got {amount!r}")


class InsufficientBalanceError(SplitterError):
    """잔고 부족

    withdraw 요청 금액이 현재 잔고보다 클 때 발생. 잔고는 변경되지 않음.
    """

    def __init__(self, account: str, requested: int, available: int):
        self.account = account
        self.requested = requested
        self.available = available
        super().__init__(
            f"Insufficient balance for {account}: "
            f"requested {requested}, available {available}"
        )


class LedgerOverflowError(SplitterError, ArithmeticError):
    """산술 오버플로우

    분배 계산 또는 잔고 누적이 MAX_VALUE를 넘을 때 발생.
    호출 전체가 중단되며 상태는 변경되지 않음.
    """
    pass


class GatewayError(SplitterError):
    """게이트웨이 지급 실패

    외부 가치 이전이 실패했을 때 발생.
    withdraw는 해당 호출의 차감을 되돌리고, transfer_all은 해당 수령인만 되돌림.
    """

    def __init__(self, account: str, amount: int, reason: str):
        self.account = account
        self.amount = amount
        self.reason = reason
        super().__init__(f"Release of {amount} to {account} failed: {reason}")


class PersistenceError(SplitterError):
    """상태 저장 실패

    메모리 상태는 이미 반영된 뒤이므로 호출 결과를 바꾸지 않음.
    저장되지 않은 변경은 다음 저장 때 함께 기록됨.
    """
    pass
