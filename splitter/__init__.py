"""
지분 분배 원장 모듈

입금을 수령인 지분대로 적립하고, 적립 잔고를 게이트웨이로 지급.
"""

from splitter.deposit_handler import DepositSplitter
from splitter.manager import Splitter
from splitter.models import (
    DepositReceipt,
    Holdings,
    RedemptionOutcome,
    TransferAllResult,
    WithdrawReceipt,
)
from splitter.redemption import RedemptionService

__all__ = [
    "Splitter",
    "DepositSplitter",
    "RedemptionService",
    "DepositReceipt",
    "WithdrawReceipt",
    "RedemptionOutcome",
    "TransferAllResult",
    "Holdings",
]
