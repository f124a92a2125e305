"""
스토리지 모듈

EventLog(인메모리), EventStore/SplitterStateStore(SQLite) 제공
"""

from core.storage.event_log import EventLog
from core.storage.event_store import EventStore
from core.storage.state_store import PersistedState, SplitterStateStore

__all__ = [
    "EventLog",
    "EventStore",
    "PersistedState",
    "SplitterStateStore",
]
