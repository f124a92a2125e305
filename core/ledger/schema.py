"""
분배 원장 스키마 초기화

Web 시작 시 자동으로 원장 테이블 생성.
CREATE IF NOT EXISTS 패턴으로 안전하게 동작.

주의: 금액은 2**256 범위 정수이므로 모두 TEXT로 저장
"""

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from adapters.db.sqlite_adapter import SQLiteAdapter

logger = logging.getLogger(__name__)


async def init_schema(db: "SQLiteAdapter") -> None:
    """원장 스키마 초기화

    이미 존재하는 경우 안전하게 건너뜀 (IF NOT EXISTS).

    Args:
        db: 연결된 SQLiteAdapter
    """
    # recipient (등록 순서 = position)
    await db.execute("""
        CREATE TABLE IF NOT EXISTS recipient (
            position     INTEGER PRIMARY KEY,
            account      TEXT NOT NULL,
            share        INTEGER NOT NULL CHECK (share > 0 AND share <= 10000)
        )
    """)

    # balance (계정별 잔고)
    await db.execute("""
        CREATE TABLE IF NOT EXISTS balance (
            account      TEXT PRIMARY KEY,
            amount       TEXT NOT NULL DEFAULT '0',
            state        TEXT NOT NULL DEFAULT 'UNFUNDED',
            updated_at   TEXT NOT NULL DEFAULT (datetime('now'))
        )
    """)

    # ledger_totals (단일 행)
    await db.execute("""
        CREATE TABLE IF NOT EXISTS ledger_totals (
            id               INTEGER PRIMARY KEY CHECK (id = 1),
            total_received   TEXT NOT NULL DEFAULT '0',
            total_released   TEXT NOT NULL DEFAULT '0',
            updated_at       TEXT NOT NULL DEFAULT (datetime('now'))
        )
    """)

    # event_store (append-only)
    await db.execute("""
        CREATE TABLE IF NOT EXISTS event_store (
            seq              INTEGER PRIMARY KEY,
            event_id         TEXT NOT NULL UNIQUE,
            event_type       TEXT NOT NULL,
            ts               TEXT NOT NULL,

            correlation_id   TEXT NOT NULL,
            source           TEXT NOT NULL,

            entity_kind      TEXT NOT NULL,
            entity_id        TEXT NOT NULL,

            payload_json     TEXT NOT NULL,

            created_at       TEXT NOT NULL DEFAULT (datetime('now'))
        )
    """)

    # 인덱스 생성
    await db.execute("""
        CREATE INDEX IF NOT EXISTS ix_event_store_correlation
        ON event_store(correlation_id)
    """)

    await db.execute("""
        CREATE INDEX IF NOT EXISTS ix_event_store_entity
        ON event_store(entity_kind, entity_id)
    """)

    await db.execute("""
        CREATE INDEX IF NOT EXISTS ix_event_store_type
        ON event_store(event_type)
    """)

    await db.commit()
    logger.info("원장 스키마 초기화 완료")
