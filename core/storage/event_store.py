"""
EventStore - 이벤트 저장소

EventLog의 이벤트를 SQLite에 append-only로 저장.
event_id UNIQUE 제약으로 같은 이벤트의 중복 저장 방지.
"""

import json
import logging
from datetime import datetime
from typing import Any

from adapters.db.sqlite_adapter import SQLiteAdapter
from core.domain.events import Event

logger = logging.getLogger(__name__)

_SELECT_COLUMNS = """
    seq, event_id, event_type, ts,
    correlation_id, source,
    entity_kind, entity_id,
    payload_json
"""


class EventStore:
    """이벤트 저장소

    Args:
        db: SQLiteAdapter 인스턴스

    사용 예시:
    ```python
    async with SQLiteAdapter(db_path) as db:
        event_store = EventStore(db)

        async with db.transaction():
            await event_store.append_many(events)

        events = await event_store.get_all()
    ```
    """

    def __init__(self, db: SQLiteAdapter):
        self.db = db

    async def append_many(self, events: list[Event]) -> int:
        """이벤트 저장 (중복 무시)

        커밋하지 않음. 호출자의 트랜잭션 안에서 상태 저장과 함께 호출.

        Args:
            events: seq가 할당된 Event 목록

        Returns:
            전달된 이벤트 수
        """
        if not events:
            return 0

        await self.db.executemany(
            """
            INSERT OR IGNORE INTO event_store (
                seq, event_id, event_type, ts,
                correlation_id, source,
                entity_kind, entity_id,
                payload_json
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            [
                (
                    event.seq,
                    event.event_id,
                    event.event_type,
                    event.ts.isoformat(),
                    event.correlation_id,
                    event.source,
                    event.entity_kind,
                    event.entity_id,
                    json.dumps(event.payload, ensure_ascii=False),
                )
                for event in events
            ],
        )

        logger.debug(f"이벤트 저장: {len(events)}건")
        return len(events)

    async def get_all(self) -> list[Event]:
        """전체 이벤트 조회 (seq 순서)"""
        rows = await self.db.fetchall(
            f"SELECT {_SELECT_COLUMNS} FROM event_store ORDER BY seq ASC"
        )
        return [self._row_to_event(row) for row in rows]

    def _row_to_event(self, row: tuple[Any, ...]) -> Event:
        """DB 행을 Event 객체로 변환

        컬럼 순서:
        0: seq, 1: event_id, 2: event_type, 3: ts,
        4: correlation_id, 5: source,
        6: entity_kind, 7: entity_id, 8: payload_json
        """
        ts = row[3]
        if isinstance(ts, str):
            ts = datetime.fromisoformat(ts)

        payload = row[8]
        if isinstance(payload, str):
            payload = json.loads(payload)

        return Event(
            event_id=row[1],
            event_type=row[2],
            ts=ts,
            correlation_id=row[4],
            source=row[5],
            entity_kind=row[6],
            entity_id=row[7],
            payload=payload,
            seq=row[0],
        )
