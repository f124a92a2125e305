"""
잔고 API 라우터

GET /api/balances/{account} - 계정 적립 잔고
GET /api/holdings - 인스턴스 보유 현황
"""

from fastapi import APIRouter, Depends

from splitter.manager import Splitter
from web.dependencies import get_splitter
from web.models.responses import BalanceResponse, HoldingsResponse

router = APIRouter(prefix="/api", tags=["Balances"])


@router.get("/balances/{account}", response_model=BalanceResponse)
async def get_balance(
    account: str,
    splitter: Splitter = Depends(get_splitter),
) -> BalanceResponse:
    """계정 잔고 (미등록 계정은 0)"""
    return BalanceResponse(
        account=account,
        balance=str(splitter.balance_of(account)),
        state=splitter.state_of(account),
    )


@router.get("/holdings", response_model=HoldingsResponse)
async def get_holdings(
    splitter: Splitter = Depends(get_splitter),
) -> HoldingsResponse:
    """총 입금/지급액, 미지급 잔고 합계, 미배정 보유액"""
    return HoldingsResponse.from_holdings(splitter.holdings())
