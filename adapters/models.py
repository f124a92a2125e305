"""
어댑터 공통 모델

게이트웨이 응답을 내부 표현으로 변환한 데이터 구조.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any


@dataclass(frozen=True)
class ReleaseReceipt:
    """지급 영수증

    게이트웨이가 가치 이전을 완료했다는 증빙.
    """

    release_id: str
    account: str
    amount: int
    ts: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @classmethod
    def from_api(cls, data: dict[str, Any], account: str, amount: int) -> "ReleaseReceipt":
        """게이트웨이 API 응답에서 생성

        Args:
            data: 응답 JSON ({"release_id": ..., "ts": ...})
            account: 요청한 수령 계정
            amount: 요청한 금액
        """
        if not isinstance(data, dict):
            raise ValueError(f"Gateway response is not an object: {data!r}")

        release_id = data.get("release_id") or data.get("id")
        if not release_id:
            raise ValueError(f"Gateway response has no release id: {data}")

        ts_raw = data.get("ts")
        ts = datetime.fromisoformat(ts_raw) if ts_raw else datetime.now(timezone.utc)

        return cls(
            release_id=str(release_id),
            account=account,
            amount=amount,
            ts=ts,
        )
