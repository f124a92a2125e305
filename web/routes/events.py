"""
Events 라우트

이벤트 히스토리 조회 API
"""

from fastapi import APIRouter, Depends, HTTPException, Query

from core.domain.events import EventTypes
from splitter.manager import Splitter
from web.dependencies import get_splitter
from web.models.responses import EventListResponse, EventResponse

router = APIRouter(prefix="/api", tags=["Events"])


@router.get("/events", response_model=EventListResponse)
async def get_events(
    tx_id: str | None = Query(default=None, description="최상위 호출 tx_id"),
    account: str | None = Query(default=None, description="계정 필터"),
    event_type: str | None = Query(default=None, description="이벤트 타입 필터"),
    limit: int = Query(default=100, ge=1, le=500, description="조회 제한"),
    offset: int = Query(default=0, ge=0, description="조회 시작 위치"),
    splitter: Splitter = Depends(get_splitter),
) -> EventListResponse:
    """이벤트 목록 조회 (seq 순서)

    필터링, 페이지네이션 지원.
    """
    if event_type is not None and not EventTypes.is_valid_type(event_type):
        raise HTTPException(status_code=400, detail=f"Unknown event type: {event_type}")

    events = splitter.events(tx_id=tx_id, account=account, event_type=event_type)

    return EventListResponse(
        events=[EventResponse.from_event(e) for e in events[offset:offset + limit]],
        total=len(events),
    )
