"""
SplitterStateStore - 원장 상태 저장소

수령인 목록, 계정 잔고, 총 입금/지급액을 SQLite에 저장/로드.
최상위 호출이 끝날 때마다 전체 상태를 덮어씀 (write-through).
"""

import logging
from dataclasses import dataclass, field

import aiosqlite

from adapters.db.sqlite_adapter import SQLiteAdapter
from core.domain.events import Event
from core.errors import PersistenceError
from core.ledger.types import RecipientShare
from core.storage.event_store import EventStore

logger = logging.getLogger(__name__)


@dataclass
class PersistedState:
    """저장된 원장 상태"""

    recipients: list[RecipientShare] = field(default_factory=list)
    balances: dict[str, int] = field(default_factory=dict)
    states: dict[str, str] = field(default_factory=dict)
    total_received: int = 0
    total_released: int = 0
    events: list[Event] = field(default_factory=list)


class SplitterStateStore:
    """원장 상태 저장소

    Args:
        db: 스키마가 초기화된 SQLiteAdapter
    """

    def __init__(self, db: SQLiteAdapter):
        self.db = db
        self.event_store = EventStore(db)

    async def save(
        self,
        recipients: list[RecipientShare],
        balances: dict[str, int],
        states: dict[str, str],
        total_received: int,
        total_released: int,
        events: list[Event],
    ) -> None:
        """상태 저장 (단일 트랜잭션)

        Args:
            recipients: 등록 순서의 수령인 목록
            balances: 계정별 잔고
            states: 계정별 잔고 상태
            total_received: 총 입금액
            total_released: 총 지급액
            events: 아직 저장되지 않은 이벤트

        Raises:
            PersistenceError: SQLite 쓰기 실패 (트랜잭션 롤백됨)
        """
        try:
            async with self.db.transaction():
                await self.db.execute("DELETE FROM recipient")
                await self.db.executemany(
                    "INSERT INTO recipient (position, account, share) VALUES (?, ?, ?)",
                    [(i, r.account, r.share) for i, r in enumerate(recipients)],
                )

                await self.db.executemany(
                    """
                    INSERT INTO balance (account, amount, state)
                    VALUES (?, ?, ?)
                    ON CONFLICT(account) DO UPDATE SET
                        amount = excluded.amount,
                        state = excluded.state,
                        updated_at = datetime('now')
                    """,
                    [
                        (account, str(amount), states.get(account, "UNFUNDED"))
                        for account, amount in balances.items()
                    ],
                )

                await self.db.execute(
                    """
                    INSERT INTO ledger_totals (id, total_received, total_released)
                    VALUES (1, ?, ?)
                    ON CONFLICT(id) DO UPDATE SET
                        total_received = excluded.total_received,
                        total_released = excluded.total_released,
                        updated_at = datetime('now')
                    """,
                    (str(total_received), str(total_released)),
                )

                await self.event_store.append_many(events)
        except aiosqlite.Error as e:
            raise PersistenceError(f"Failed to save splitter state: {e}") from e

        logger.debug(
            "원장 상태 저장",
            extra={"recipients": len(recipients), "accounts": len(balances), "events": len(events)},
        )

    async def load(self) -> PersistedState:
        """저장된 상태 로드 (없으면 빈 상태)"""
        recipient_rows = await self.db.fetchall(
            "SELECT account, share FROM recipient ORDER BY position ASC"
        )
        balance_rows = await self.db.fetchall("SELECT account, amount, state FROM balance")
        totals_row = await self.db.fetchone(
            "SELECT total_received, total_released FROM ledger_totals WHERE id = 1"
        )

        return PersistedState(
            recipients=[RecipientShare(account=row[0], share=int(row[1])) for row in recipient_rows],
            balances={row[0]: int(row[1]) for row in balance_rows},
            states={row[0]: row[2] for row in balance_rows},
            total_received=int(totals_row[0]) if totals_row else 0,
            total_released=int(totals_row[1]) if totals_row else 0,
            events=await self.event_store.get_all(),
        )
