"""
의존성 주입

FastAPI의 Depends를 사용한 의존성 관리.
"""

import logging
import secrets

from fastapi import Depends, Header, HTTPException

from core.config.loader import Settings, get_settings
from splitter.manager import Splitter

logger = logging.getLogger(__name__)


def get_app_settings() -> Settings:
    """애플리케이션 설정 반환"""
    return get_settings()


def verify_gateway_callback(
    x_gateway_key: str | None = Header(default=None, description="게이트웨이 콜백 인증 키"),
    settings: Settings = Depends(get_app_settings),
) -> None:
    """입금 콜백 인증

    gateway.callback_key와 X-Gateway-Key 헤더를 비교.

    Raises:
        HTTPException: 키 누락 401, 서버 키 미설정 503, 키 불일치 403
    """
    if not x_gateway_key:
        raise HTTPException(
            status_code=401,
            detail={"error": "Unauthenticated", "message": "X-Gateway-Key header required"},
        )

    expected = settings.gateway.callback_key
    if not expected:
        raise HTTPException(
            status_code=503,
            detail={"error": "NotConfigured", "message": "gateway.callback_key is not configured"},
        )

    if not secrets.compare_digest(x_gateway_key.encode(), expected.encode()):
        logger.warning("Deposit callback rejected: invalid gateway key")
        raise HTTPException(
            status_code=403,
            detail={"error": "Forbidden", "message": "Invalid gateway key"},
        )


# =========================================================================
# Splitter (앱 lifespan에서 생성)
# =========================================================================

# 프로세스 전역 Splitter 인스턴스
_splitter: Splitter | None = None


def set_splitter(splitter: Splitter | None) -> None:
    """Splitter 설정

    앱 시작 시(또는 테스트에서) 호출하여 전역 인스턴스 설정.

    Args:
        splitter: Splitter 인스턴스 (None이면 해제)
    """
    global _splitter
    _splitter = splitter


def current_splitter() -> Splitter | None:
    """설정된 Splitter 반환 (없으면 None)"""
    return _splitter


def get_splitter() -> Splitter:
    """Splitter 반환 (라우트 의존성)

    Raises:
        HTTPException: 초기화되지 않은 경우 503
    """
    if _splitter is None:
        raise HTTPException(status_code=503, detail="Splitter is not initialized")
    return _splitter
