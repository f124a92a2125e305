"""
로깅 설정 유틸리티

Web/CLI 진입점에서 호출하는 공통 로깅 설정.
- 콘솔: stdout
- 파일: logs/{process_name}.log (자정 롤링, 7일 보관)

원장 코드는 extra={"tx_id": ...} 형태로 호출 문맥을 남김.
ContextFormatter가 이 값을 로그 줄 끝에 key=value로 붙여서
같은 tx_id의 입금/지급 로그를 grep으로 묶어 볼 수 있음.

사용법:
    from core.logging import setup_logging
    setup_logging("web")
"""

import logging
import sys
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path

from core.constants import Defaults, Paths

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
LOG_FILE_BACKUP_COUNT = 7

# 레벨을 WARNING으로 낮출 라이브러리 로거
NOISY_LOGGERS = [
    "aiosqlite",      # 쿼리마다 executing/completed 로그
    "httpcore",
    "httpx",
    "asyncio",
    "uvicorn.access", # 요청마다 access 로그
]

# LogRecord 기본 속성 (extra 구분용)
_RESERVED_ATTRS = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", (), None))
) | {"message", "asctime", "taskName"}


class ContextFormatter(logging.Formatter):
    """extra로 전달된 필드를 메시지 뒤에 붙이는 Formatter

    예: ... | splitter.redemption | Withdraw: 500 to 0xabc | tx_id=... release_id=...
    """

    def __init__(self) -> None:
        super().__init__(LOG_FORMAT, datefmt=LOG_DATE_FORMAT)

    def formatMessage(self, record: logging.LogRecord) -> str:
        line = super().formatMessage(record)
        context = extra_fields(record)
        if not context:
            return line
        return line + " | " + " ".join(f"{key}={value}" for key, value in context.items())


def extra_fields(record: logging.LogRecord) -> dict[str, object]:
    """LogRecord에서 extra로 추가된 필드만 추출 (추가 순서 유지)"""
    return {
        key: value
        for key, value in vars(record).items()
        if key not in _RESERVED_ATTRS and not key.startswith("_")
    }


def setup_logging(
    process_name: str,
    console_level: int | str = Defaults.LOG_LEVEL,
    file_level: int | str = logging.INFO,
    log_dir: Path | None = None,
) -> logging.Logger:
    """루트 로거 설정

    여러 번 호출해도 핸들러가 중복되지 않음.

    Args:
        process_name: 프로세스 이름 (로그 파일명으로 사용)
        console_level: 콘솔 로그 레벨
        file_level: 파일 로그 레벨
        log_dir: 로그 디렉토리 (None이면 Paths.LOGS_DIR)

    Returns:
        설정된 루트 Logger
    """
    log_file = get_log_file_path(process_name, log_dir)
    log_file.parent.mkdir(parents=True, exist_ok=True)

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)  # 핸들러에서 필터링
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
        handler.close()

    formatter = ContextFormatter()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(console_level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    file_handler = TimedRotatingFileHandler(
        filename=log_file,
        when="midnight",
        backupCount=LOG_FILE_BACKUP_COUNT,
        encoding="utf-8",
    )
    file_handler.suffix = "%Y-%m-%d"  # web.log.2026-02-21
    file_handler.setLevel(file_level)
    file_handler.setFormatter(formatter)
    root_logger.addHandler(file_handler)

    for logger_name in NOISY_LOGGERS:
        logging.getLogger(logger_name).setLevel(logging.WARNING)

    root_logger.info(
        f"로깅 초기화 완료: {process_name}",
        extra={"log_file": str(log_file)},
    )
    return root_logger


def get_log_file_path(process_name: str, log_dir: Path | None = None) -> Path:
    """로그 파일 경로 반환"""
    return (log_dir or Paths.LOGS_DIR) / f"{process_name}.log"
