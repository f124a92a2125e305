"""
입금/지급 API 라우터

POST /api/deposits     - 입금 콜백 (게이트웨이 전용, 송금자 = X-Account)
POST /api/withdraw     - 호출자 잔고 지급 (호출자 = X-Account)
POST /api/transfer-all - 모든 수령인 일괄 지급
"""

import logging

from fastapi import APIRouter, Depends, Header

from core.errors import SplitterError
from splitter.manager import Splitter
from web.dependencies import get_splitter, verify_gateway_callback
from web.errors import to_http_exception
from web.models.requests import DepositRequest, WithdrawRequest, parse_amount
from web.models.responses import DepositResponse, TransferAllResponse, WithdrawResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Transfers"])


@router.post(
    "/deposits",
    response_model=DepositResponse,
    dependencies=[Depends(verify_gateway_callback)],
)
async def receive_deposit(
    request: DepositRequest,
    x_account: str = Header(..., description="송금 계정"),
    splitter: Splitter = Depends(get_splitter),
) -> DepositResponse:
    """입금 분배

    X-Gateway-Key 인증 실패는 401/403, 금액 오류는 400, 오버플로우는 422.
    """
    try:
        receipt = await splitter.receive(x_account, parse_amount(request.amount))
    except SplitterError as e:
        raise to_http_exception(e) from e

    return DepositResponse.from_receipt(receipt)


@router.post("/withdraw", response_model=WithdrawResponse)
async def withdraw(
    request: WithdrawRequest,
    x_account: str = Header(..., description="호출 계정"),
    splitter: Splitter = Depends(get_splitter),
) -> WithdrawResponse:
    """호출자 잔고 지급

    잔고 부족은 409, 게이트웨이 실패는 502 (잔고 복구됨).
    """
    try:
        receipt = await splitter.withdraw(x_account, parse_amount(request.amount))
    except SplitterError as e:
        raise to_http_exception(e) from e

    return WithdrawResponse.from_receipt(receipt)


@router.post("/transfer-all", response_model=TransferAllResponse)
async def transfer_all(
    splitter: Splitter = Depends(get_splitter),
) -> TransferAllResponse:
    """모든 수령인 일괄 지급

    수령인별 실패는 응답의 outcomes로 전달되며 요청 자체는 성공.
    """
    result = await splitter.transfer_all()
    if not result.all_succeeded:
        logger.warning(
            f"Transfer all finished with {len(result.failed)} failures",
            extra={"tx_id": result.tx_id},
        )
    return TransferAllResponse.from_result(result)
