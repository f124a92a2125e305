"""
하드코딩 상수 - 변경될 일이 거의 없는 고정값

중요: 경로는 반드시 pathlib.Path 사용 (Windows/Linux 크로스 플랫폼)
"""

from pathlib import Path


# 프로젝트 루트 (이 파일 기준 2단계 상위: core/constants.py → splitter 루트)
PROJECT_ROOT: Path = Path(__file__).resolve().parent.parent


class ShareLimits:
    """지분(basis point) 상수

    10000 = 100.00%
    """

    SCALE: int = 10_000
    MIN_SHARE: int = 1
    MAX_SHARE: int = 10_000


class ValueLimits:
    """금액 상수

    금액은 최소 단위 정수 (wei와 동일한 개념).
    MAX_VALUE를 넘는 곱/합은 오버플로우로 간주.
    """

    MAX_VALUE: int = 2**256 - 1


class Defaults:
    """기본값 상수"""

    WEB_HOST: str = "127.0.0.1"
    WEB_PORT: int = 8000

    GATEWAY_TIMEOUT_SEC: float = 30.0

    LOG_LEVEL: str = "INFO"
    VERSION: str = "1.0.0"


class Paths:
    """프로젝트 경로 상수 (pathlib 사용 - OS 독립적)"""

    # 디렉토리
    CONFIG_DIR: Path = PROJECT_ROOT / "config"
    DATA_DIR: Path = PROJECT_ROOT / "data"
    LOGS_DIR: Path = PROJECT_ROOT / "logs"

    # 설정 파일
    CONFIG_FILE: Path = CONFIG_DIR / "config.yaml"

    # DB 파일
    PROD_DB: Path = DATA_DIR / "splitter_prod.db"
    TEST_DB: Path = DATA_DIR / "splitter_test.db"
