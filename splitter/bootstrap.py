"""
Splitter Bootstrap

설정 로드, 의존성 생성, 종료 시 리소스 정리.
"""

import logging

from adapters.db.sqlite_adapter import SQLiteAdapter
from adapters.gateway.rest_client import HttpValueGateway
from adapters.interfaces import IValueGateway
from core.config.loader import Settings
from core.ledger.schema import init_schema
from core.storage.state_store import SplitterStateStore
from splitter.manager import Splitter

logger = logging.getLogger(__name__)


class SplitterRuntime:
    """Splitter 실행 환경

    DB 연결, 스키마 초기화, 게이트웨이 생성, 상태 로드를 담당.

    Args:
        settings: 설정 객체
        gateway: 게이트웨이 (None이면 설정의 HTTP 게이트웨이 사용)
    """

    def __init__(self, settings: Settings, gateway: IValueGateway | None = None):
        self.settings = settings
        self.db = SQLiteAdapter(settings.db_path)
        self.gateway = gateway or HttpValueGateway(
            base_url=settings.gateway.base_url,
            api_key=settings.gateway.api_key,
            timeout=settings.gateway.timeout,
        )
        self.splitter: Splitter | None = None

    async def start(self) -> Splitter:
        """DB 연결 후 저장된 상태로 Splitter 생성"""
        await self.db.connect()
        await init_schema(self.db)

        splitter = Splitter(
            owner=self.settings.owner,
            gateway=self.gateway,
            store=SplitterStateStore(self.db),
        )
        await splitter.load()
        self.splitter = splitter

        logger.info(
            f"Splitter started (mode={self.settings.mode.value})",
            extra={"db_path": str(self.settings.db_path), "owner": self.settings.owner},
        )
        return splitter

    async def stop(self) -> None:
        """게이트웨이 및 DB 연결 종료"""
        if isinstance(self.gateway, HttpValueGateway):
            await self.gateway.close()
        await self.db.close()
        self.splitter = None
        logger.info("Splitter stopped")
