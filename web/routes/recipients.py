"""
수령인 API 라우터

POST   /api/recipients - 수령인 추가 (소유자 전용)
DELETE /api/recipients - 수령인 전체 삭제 (소유자 전용)
GET    /api/recipients - 수령인 목록
"""

import logging

from fastapi import APIRouter, Depends, Header, Query

from core.errors import SplitterError
from splitter.manager import Splitter
from web.dependencies import get_splitter
from web.errors import to_http_exception
from web.models.requests import AddRecipientRequest
from web.models.responses import (
    RecipientListResponse,
    RecipientResponse,
    RemoveRecipientsResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/recipients", tags=["Recipients"])


@router.post("", response_model=RecipientResponse, status_code=201)
async def add_recipient(
    request: AddRecipientRequest,
    x_account: str = Header(..., description="호출 계정"),
    splitter: Splitter = Depends(get_splitter),
) -> RecipientResponse:
    """수령인 추가

    지분 합계가 10000을 넘으면 400, 소유자가 아니면 403.
    """
    try:
        recipient = await splitter.add_recipient(x_account, request.account, request.share)
    except SplitterError as e:
        raise to_http_exception(e) from e

    return RecipientResponse.from_share(recipient)


@router.delete("", response_model=RemoveRecipientsResponse)
async def remove_all_recipients(
    x_account: str = Header(..., description="호출 계정"),
    splitter: Splitter = Depends(get_splitter),
) -> RemoveRecipientsResponse:
    """수령인 전체 삭제 (적립 잔고는 유지)"""
    try:
        removed = await splitter.remove_all_recipients(x_account)
    except SplitterError as e:
        raise to_http_exception(e) from e

    return RemoveRecipientsResponse(removed=removed)


@router.get("", response_model=RecipientListResponse)
async def get_recipients(
    as_of: str | None = Query(default=None, description="조회 시점 (현재는 무시됨)"),
    splitter: Splitter = Depends(get_splitter),
) -> RecipientListResponse:
    """수령인 목록 (등록 순서)"""
    recipients = splitter.get_recipients(as_of)
    return RecipientListResponse(
        recipients=[RecipientResponse.from_share(r) for r in recipients],
        total_share=sum(r.share for r in recipients),
    )
