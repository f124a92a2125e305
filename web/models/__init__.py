"""
Web 모델 패키지

Pydantic 스키마 정의
"""

from web.models.requests import (
    AddRecipientRequest,
    DepositRequest,
    WithdrawRequest,
    parse_amount,
)
from web.models.responses import (
    BalanceResponse,
    DepositResponse,
    EventListResponse,
    EventResponse,
    HealthResponse,
    HoldingsResponse,
    RecipientListResponse,
    RecipientResponse,
    RemoveRecipientsResponse,
    TransferAllResponse,
    WithdrawResponse,
)

__all__ = [
    # Requests
    "AddRecipientRequest",
    "DepositRequest",
    "WithdrawRequest",
    "parse_amount",
    # Responses
    "BalanceResponse",
    "DepositResponse",
    "EventListResponse",
    "EventResponse",
    "HealthResponse",
    "HoldingsResponse",
    "RecipientListResponse",
    "RecipientResponse",
    "RemoveRecipientsResponse",
    "TransferAllResponse",
    "WithdrawResponse",
]
