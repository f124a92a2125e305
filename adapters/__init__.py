"""
어댑터 레이어

외부 서비스(가치 이전 게이트웨이, DB)와의 연동을 담당.
Protocol 기반 인터페이스로 Mock 교체 가능.
"""

from adapters.interfaces import IValueGateway
from adapters.models import ReleaseReceipt

__all__ = [
    # Interfaces
    "IValueGateway",
    # Models
    "ReleaseReceipt",
]
