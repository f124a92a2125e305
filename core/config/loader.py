"""
설정 로더

config.yaml 로드 및 분배 원장 설정 생성
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from core.constants import Defaults, Paths, PROJECT_ROOT
from core.types import RunMode


@dataclass(frozen=True)
class GatewayConfig:
    """가치 이전 게이트웨이 연결 설정"""

    base_url: str
    api_key: str
    timeout: float = Defaults.GATEWAY_TIMEOUT_SEC
    # 입금 콜백 인증 키 (비어 있으면 입금 콜백 거부)
    callback_key: str = ""


@dataclass(frozen=True)
class WebConfig:
    """Web 서버 설정"""

    host: str = Defaults.WEB_HOST
    port: int = Defaults.WEB_PORT


@dataclass(frozen=True)
class SplitterConfig:
    """분배 원장 설정 (config.yaml에서 로드)

    불변 데이터 구조로 설정 변경 방지.
    owner는 수령인 설정을 변경할 수 있는 유일한 계정.
    """

    mode: RunMode
    owner: str
    db_path: Path
    gateway: GatewayConfig
    web: WebConfig


class ConfigLoadError(Exception):
    """설정 로드 실패 예외"""

    pass


def get_db_path(mode: RunMode, configured: str | None = None) -> Path:
    """모드에 따른 DB 경로 반환

    Args:
        mode: 실행 모드
        configured: config.yaml의 database.path (상대 경로는 프로젝트 루트 기준)

    Returns:
        DB 파일 경로 (Path 타입)
    """
    if configured:
        path = Path(configured)
        return path if path.is_absolute() else PROJECT_ROOT / path

    if mode == RunMode.PRODUCTION:
        return Paths.PROD_DB
    return Paths.TEST_DB


def _parse_gateway(data: dict[str, Any]) -> GatewayConfig:
    gateway_data = data.get("gateway")
    if not gateway_data:
        raise ConfigLoadError("config.yaml에 'gateway' 섹션이 없습니다")

    base_url = gateway_data.get("base_url")
    if not base_url:
        raise ConfigLoadError("config.yaml의 gateway 섹션에 'base_url'이 없습니다")

    api_key = gateway_data.get("api_key")
    if not api_key:
        raise ConfigLoadError("config.yaml의 gateway 섹션에 'api_key'가 없습니다")

    return GatewayConfig(
        base_url=str(base_url).rstrip("/"),
        api_key=str(api_key),
        timeout=float(gateway_data.get("timeout", Defaults.GATEWAY_TIMEOUT_SEC)),
        callback_key=str(gateway_data.get("callback_key") or ""),
    )


def load_config(path: Path | None = None) -> SplitterConfig:
    """config.yaml 파일 로드

    Args:
        path: config.yaml 경로 (None이면 기본 경로 사용)

    Returns:
        SplitterConfig 인스턴스

    Raises:
        ConfigLoadError: 파일이 없거나 형식이 잘못된 경우
        ValueError: 유효하지 않은 mode인 경우
    """
    if path is None:
        path = Paths.CONFIG_FILE

    if not path.exists():
        raise ConfigLoadError(f"config.yaml 파일을 찾을 수 없습니다: {path}")

    try:
        content = path.read_text(encoding="utf-8")
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise ConfigLoadError(f"config.yaml 파싱 실패: {e}") from e

    if data is None:
        raise ConfigLoadError("config.yaml이 비어 있습니다")

    # mode 검증 (없으면 testnet)
    mode_str = data.get("mode", RunMode.TESTNET.value)
    try:
        mode = RunMode(mode_str)
    except ValueError as e:
        valid_modes = [m.value for m in RunMode]
        raise ValueError(
            f"유효하지 않은 mode입니다: '{mode_str}'. "
            f"유효한 값: {valid_modes}"
        ) from e

    owner = data.get("owner")
    if not owner:
        raise ConfigLoadError("config.yaml에 'owner' 필드가 없습니다")

    database = data.get("database") or {}
    web_data = data.get("web") or {}

    return SplitterConfig(
        mode=mode,
        owner=str(owner),
        db_path=get_db_path(mode, database.get("path")),
        gateway=_parse_gateway(data),
        web=WebConfig(
            host=web_data.get("host", Defaults.WEB_HOST),
            port=int(web_data.get("port", Defaults.WEB_PORT)),
        ),
    )


class Settings:
    """애플리케이션 설정 (싱글턴 패턴)

    config.yaml을 로드하고 관련 설정을 제공
    """

    _instance: "Settings | None" = None
    _config: SplitterConfig | None = None

    def __new__(cls, config_path: Path | None = None) -> "Settings":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self, config_path: Path | None = None) -> None:
        if self._config is None:
            self._config = load_config(config_path)

    @property
    def mode(self) -> RunMode:
        """현재 실행 모드"""
        assert self._config is not None
        return self._config.mode

    @property
    def owner(self) -> str:
        """소유자 계정"""
        assert self._config is not None
        return self._config.owner

    @property
    def db_path(self) -> Path:
        """현재 모드의 DB 경로"""
        assert self._config is not None
        return self._config.db_path

    @property
    def gateway(self) -> GatewayConfig:
        """게이트웨이 설정"""
        assert self._config is not None
        return self._config.gateway

    @property
    def web(self) -> WebConfig:
        """Web 서버 설정"""
        assert self._config is not None
        return self._config.web

    @classmethod
    def reset(cls) -> None:
        """싱글턴 인스턴스 초기화 (테스트용)"""
        cls._instance = None
        cls._config = None


def get_settings(config_path: Path | None = None) -> Settings:
    """Settings 인스턴스 반환

    Args:
        config_path: config.yaml 경로 (None이면 기본 경로 사용)

    Returns:
        Settings 싱글턴 인스턴스
    """
    return Settings(config_path)
