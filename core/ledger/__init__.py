"""
분배 원장 (Percentage Split Ledger)

수령인 지분 레지스트리와 계정별 잔고 장부.

사용 예시:
```python
from core.ledger import BalanceLedger, PercentageRegistry

registry = PercentageRegistry()
registry.add_recipient("0xabc", 5000)

ledger = BalanceLedger()
ledger.apply_deposit(100, [("0xabc", 50)])
ledger.balance_of("0xabc")  # 50
```
"""

from core.ledger.balances import (
    BalanceLedger,
    checked_add,
    checked_mul,
    ensure_positive_amount,
)
from core.ledger.registry import PercentageRegistry, SHARE_OVERFLOW_MESSAGE
from core.ledger.types import RecipientShare

__all__ = [
    # 핵심 클래스
    "PercentageRegistry",
    "BalanceLedger",
    "RecipientShare",
    # 산술 헬퍼
    "checked_add",
    "checked_mul",
    "ensure_positive_amount",
    # 상수
    "SHARE_OVERFLOW_MESSAGE",
]
