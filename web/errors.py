"""
도메인 예외 → HTTP 응답 변환

라우트에서 SplitterError를 잡아 HTTPException으로 바꿀 때 사용.
"""

from fastapi import HTTPException

from core.errors import (
    ConfigurationError,
    GatewayError,
    InsufficientBalanceError,
    InvalidAmountError,
    LedgerOverflowError,
    SplitterError,
    UnauthorizedError,
)

# 예외 타입별 상태 코드 (먼저 일치하는 항목 사용)
ERROR_STATUS: list[tuple[type[SplitterError], int]] = [
    (ConfigurationError, 400),
    (InvalidAmountError, 400),
    (UnauthorizedError, 403),
    (InsufficientBalanceError, 409),
    (LedgerOverflowError, 422),
    (GatewayError, 502),
]


def to_http_exception(error: SplitterError) -> HTTPException:
    """도메인 예외를 HTTPException으로 변환

    Returns:
        상태 코드와 {"error": 예외 이름, "message": 메시지}를 담은 HTTPException
    """
    status_code = next(
        (code for error_type, code in ERROR_STATUS if isinstance(error, error_type)),
        500,
    )
    return HTTPException(
        status_code=status_code,
        detail={"error": type(error).__name__, "message": str(error)},
    )
