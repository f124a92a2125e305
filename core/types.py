"""
타입 정의 모듈

실행 모드, 이벤트 출처 등 핵심 Enum 정의
모든 Enum은 str을 상속하여 문자열 직렬화 가능
"""

from enum import Enum


class RunMode(str, Enum):
    """실행 모드 (운영 / 테스트)"""

    PRODUCTION = "production"
    TESTNET = "testnet"


class EventSource(str, Enum):
    """Event 출처"""

    GATEWAY = "GATEWAY"  # 게이트웨이 콜백 (입금)
    USER = "USER"  # 수령인 직접 호출 (withdraw)
    SYSTEM = "SYSTEM"  # 일괄 지급 (transfer_all)


class EntityKind(str, Enum):
    """Entity 종류"""

    ACCOUNT = "ACCOUNT"


class RedemptionStatus(str, Enum):
    """일괄 지급 항목 결과"""

    PAID = "PAID"
    SKIPPED = "SKIPPED"  # 잔고 0
    FAILED = "FAILED"  # 게이트웨이 실패 (잔고 복구됨)
