"""
FastAPI 애플리케이션

라우터 등록 및 앱 설정.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from core.config.loader import get_settings
from core.constants import Defaults
from core.logging import setup_logging

# 로깅 설정 (콘솔 + 파일)
setup_logging("web")

from splitter.bootstrap import SplitterRuntime
from web.dependencies import current_splitter, set_splitter
from web.routes import balances, events, health, recipients, transfers

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """앱 생명주기 관리

    Splitter가 이미 설정된 경우(테스트 등) 그대로 사용.
    """
    runtime = None

    if current_splitter() is None:
        runtime = SplitterRuntime(get_settings())
        set_splitter(await runtime.start())
        logger.info("Web: Splitter 초기화 완료")

    yield

    # 종료 시 - 리소스 정리
    if runtime is not None:
        set_splitter(None)
        await runtime.stop()
        logger.info("Web: Splitter 종료 완료")


app = FastAPI(
    title="Splitter API",
    description="지분 분배 원장 API",
    version=Defaults.VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

# CORS 설정 (개발용)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# =========================================================================
# API 라우터 등록
# =========================================================================

app.include_router(health.router)
app.include_router(recipients.router)
app.include_router(balances.router)
app.include_router(transfers.router)
app.include_router(events.router)
