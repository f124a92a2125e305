"""
EventLog - 인메모리 이벤트 로그

입금/지급 이벤트를 발생 순서대로 보관하는 append-only 로그.
외부 관찰자는 tx_id(correlation_id), 계정, 타입으로 조회.
"""

import logging
from typing import Iterable

from core.domain.events import Event

logger = logging.getLogger(__name__)


class EventLog:
    """이벤트 로그

    추가된 이벤트에 1부터 시작하는 seq를 할당. 수정/삭제 없음.

    사용 예시:
    ```python
    log = EventLog()
    log.append(event)

    # 특정 호출에서 발생한 이벤트
    events = log.query(tx_id=receipt.tx_id)
    ```
    """

    def __init__(self) -> None:
        self._events: list[Event] = []

    @property
    def last_seq(self) -> int:
        """마지막 seq (비어 있으면 0)"""
        return (self._events[-1].seq or 0) if self._events else 0

    def append(self, event: Event) -> Event:
        """이벤트 추가

        Args:
            event: 추가할 Event (seq 미할당)

        Returns:
            seq가 할당된 Event
        """
        event.seq = self.last_seq + 1
        self._events.append(event)

        logger.debug(
            "이벤트 기록",
            extra={
                "seq": event.seq,
                "event_type": event.event_type,
                "correlation_id": event.correlation_id,
            },
        )
        return event

    def restore(self, events: Iterable[Event]) -> None:
        """저장된 이벤트로 교체 (DB 로드용, seq 유지)"""
        self._events = sorted(events, key=lambda e: e.seq or 0)

    def get_since(self, last_seq: int, limit: int | None = None) -> list[Event]:
        """특정 seq 이후 이벤트 조회 (limit None이면 전체)"""
        events = [e for e in self._events if (e.seq or 0) > last_seq]
        return events if limit is None else events[:limit]

    def query(
        self,
        tx_id: str | None = None,
        account: str | None = None,
        event_type: str | None = None,
    ) -> list[Event]:
        """조건별 이벤트 조회 (seq 순서)

        Args:
            tx_id: 최상위 호출 ID (correlation_id)
            account: 대상 계정
            event_type: 이벤트 타입

        Returns:
            조건을 모두 만족하는 Event 리스트
        """
        return [
            e
            for e in self._events
            if (tx_id is None or e.correlation_id == tx_id)
            and (account is None or e.entity_id == account)
            and (event_type is None or e.event_type == event_type)
        ]

    def __len__(self) -> int:
        return len(self._events)
