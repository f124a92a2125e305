"""
요청 스키마 (Pydantic)

Web API 요청 데이터 검증.
금액은 정밀도 손실 방지를 위해 10진수 문자열로 받음.
"""

import re

from pydantic import BaseModel, Field

from core.constants import ValueLimits
from core.errors import InvalidAmountError, LedgerOverflowError

_AMOUNT_PATTERN = re.compile(r"[0-9]+")

# MAX_VALUE의 자릿수 (정수 변환 전 길이 검사용)
_MAX_AMOUNT_DIGITS = len(str(ValueLimits.MAX_VALUE))


def parse_amount(raw: str) -> int:
    """금액 문자열 → 정수

    Raises:
        InvalidAmountError: 10진수 정수 문자열이 아닌 경우
        LedgerOverflowError: MAX_VALUE보다 자릿수가 많은 경우
    """
    digits = raw.strip()
    if not _AMOUNT_PATTERN.fullmatch(digits):
        raise InvalidAmountError(raw)

    significant = digits.lstrip("0")
    if len(significant) > _MAX_AMOUNT_DIGITS:
        raise LedgerOverflowError(f"Amount has {len(significant)} digits, limit is {_MAX_AMOUNT_DIGITS}")
    return int(significant or "0")


class AddRecipientRequest(BaseModel):
    """수령인 추가 요청"""

    account: str = Field(..., description="수령 계정")
    share: int = Field(..., strict=True, description="지분 (basis point, 10000 = 100%)")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {"account": "0x1111111111111111111111111111111111111111", "share": 5000},
            ]
        }
    }


class DepositRequest(BaseModel):
    """입금 콜백 요청 (송금자는 X-Account 헤더)"""

    amount: str = Field(..., description="입금액 (최소 단위 정수 문자열)")


class WithdrawRequest(BaseModel):
    """withdraw 요청 (호출자는 X-Account 헤더)"""

    amount: str = Field(..., description="지급 금액 (최소 단위 정수 문자열)")
