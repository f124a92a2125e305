"""
헬스 체크 엔드포인트

GET /health - 서버 상태 확인
"""

from fastapi import APIRouter, Depends

from core.config.loader import Settings
from core.constants import Defaults
from web.dependencies import current_splitter, get_app_settings
from web.models.responses import HealthResponse

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health_check(
    settings: Settings = Depends(get_app_settings),
) -> HealthResponse:
    """서버 상태 확인

    마지막 상태 저장이 실패했으면 status는 degraded.

    Returns:
        HealthResponse: status, mode, version 정보
    """
    splitter = current_splitter()
    persist_error = splitter.persist_error if splitter is not None else None

    return HealthResponse(
        status="degraded" if persist_error else "ok",
        mode=settings.mode.value,
        version=Defaults.VERSION,
        persist_error=persist_error,
    )
