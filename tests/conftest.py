"""
pytest 공통 fixture 정의

임시 디렉토리, 설정 파일, 인메모리 DB, Mock 게이트웨이, Splitter
"""

import tempfile
from pathlib import Path
from typing import AsyncGenerator

import pytest
import pytest_asyncio

from adapters.db.sqlite_adapter import MEMORY_DB, SQLiteAdapter
from adapters.mock.gateway import MockValueGateway
from core.config.loader import Settings
from core.ledger.schema import init_schema
from core.storage.state_store import SplitterStateStore
from splitter.manager import Splitter

from tests.accounts import ONE_ETHER, OWNER, SENDER


@pytest.fixture
def temp_dir() -> Path:
    """OS 독립적인 임시 디렉토리 생성"""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def temp_config_file(temp_dir: Path) -> Path:
    """테스트용 config.yaml 파일 생성"""
    config_content = f"""# 테스트용 config.yaml
mode: testnet
owner: "{OWNER}"

database:
  path: "{(temp_dir / 'splitter.db').as_posix()}"

gateway:
  base_url: "https://gateway.test/api"
  api_key: "test_gateway_key"
  callback_key: "test_callback_key"
  timeout: 5

web:
  host: "0.0.0.0"
  port: 9000
"""
    config_path = temp_dir / "config.yaml"
    config_path.write_text(config_content, encoding="utf-8")
    return config_path


@pytest.fixture
def reset_settings():
    """Settings 싱글턴 초기화"""
    Settings.reset()
    yield
    Settings.reset()


@pytest_asyncio.fixture
async def memory_db() -> AsyncGenerator[SQLiteAdapter, None]:
    """스키마가 초기화된 인메모리 DB"""
    db = SQLiteAdapter(MEMORY_DB)
    await db.connect()
    await init_schema(db)
    yield db
    await db.close()


@pytest.fixture
def gateway() -> MockValueGateway:
    """송금자 보유액이 설정된 Mock 게이트웨이"""
    gateway = MockValueGateway()
    gateway.set_holdings(SENDER, 100 * ONE_ETHER)
    return gateway


@pytest.fixture
def splitter(gateway: MockValueGateway) -> Splitter:
    """메모리 전용 Splitter"""
    return Splitter(owner=OWNER, gateway=gateway)


@pytest_asyncio.fixture
async def persistent_splitter(
    gateway: MockValueGateway,
    memory_db: SQLiteAdapter,
) -> Splitter:
    """인메모리 DB에 저장하는 Splitter"""
    splitter = Splitter(owner=OWNER, gateway=gateway, store=SplitterStateStore(memory_db))
    await splitter.load()
    return splitter
