"""
Mock 가치 이전 게이트웨이

테스트/개발용 인메모리 게이트웨이.
IValueGateway Protocol 준수.
"""

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Awaitable, Callable

from adapters.models import ReleaseReceipt
from core.errors import GatewayError

if TYPE_CHECKING:
    from splitter.manager import Splitter
    from splitter.models import DepositReceipt

# 지급 직후 수령 계정 쪽에서 실행되는 임의 로직 (재진입 시뮬레이션)
ReleaseHook = Callable[[str, int], Awaitable[None]]


@dataclass
class MockGatewayState:
    """Mock 상태 (메모리 내 저장)"""

    # 외부 계정 보유액 (account -> amount)
    holdings: dict[str, int] = field(default_factory=dict)

    # 원장 인스턴스가 보관 중인 가치
    custody: int = 0

    # 완료된 지급
    releases: list[ReleaseReceipt] = field(default_factory=list)

    # 실패 시뮬레이션 (account -> 사유)
    failing_accounts: dict[str, str] = field(default_factory=dict)
    fail_next_reason: str | None = None


class MockValueGateway:
    """Mock 게이트웨이

    IValueGateway Protocol 구현.
    send()로 입금을 시뮬레이션하고, release()로 지급을 기록.

    사용 예시:
    ```python
    gateway = MockValueGateway()
    gateway.set_holdings("0xsender", 10**18)

    splitter = Splitter(owner="0xowner", gateway=gateway)
    await gateway.send("0xsender", splitter, 10**18)

    # 특정 계정 지급 실패
    gateway.fail_for("0xabc", "rejected")

    # 지급 도중 재진입
    gateway.on_release = lambda account, amount: splitter.withdraw(account, 1)
    ```
    """

    def __init__(self, state: MockGatewayState | None = None):
        self.state = state or MockGatewayState()
        self.on_release: ReleaseHook | None = None

    # -------------------------------------------------------------------------
    # 상태 조작 메서드 (테스트용)
    # -------------------------------------------------------------------------

    def set_holdings(self, account: str, amount: int) -> None:
        """외부 계정 보유액 설정"""
        self.state.holdings[account] = amount

    def holdings_of(self, account: str) -> int:
        """외부 계정 보유액"""
        return self.state.holdings.get(account, 0)

    def released_to(self, account: str) -> int:
        """해당 계정으로 지급된 총액"""
        return sum(r.amount for r in self.state.releases if r.account == account)

    @property
    def custody(self) -> int:
        """원장 인스턴스 보관액"""
        return self.state.custody

    @property
    def releases(self) -> list[ReleaseReceipt]:
        """완료된 지급 목록"""
        return list(self.state.releases)

    def fail_for(self, account: str, reason: str = "Mock release rejected") -> None:
        """해당 계정으로의 지급을 계속 실패시킴"""
        self.state.failing_accounts[account] = reason

    def fail_next(self, reason: str = "Mock release rejected") -> None:
        """다음 지급 1회 실패"""
        self.state.fail_next_reason = reason

    def clear_failures(self) -> None:
        """실패 설정 초기화"""
        self.state.failing_accounts.clear()
        self.state.fail_next_reason = None

    # -------------------------------------------------------------------------
    # 입금 (게이트웨이 → 원장 콜백)
    # -------------------------------------------------------------------------

    async def send(self, sender: str, splitter: "Splitter", amount: int) -> "DepositReceipt":
        """송금자 보유액을 원장 인스턴스로 이동하고 입금 콜백 호출

        콜백이 실패하면 이동도 되돌림.

        Raises:
            GatewayError: 송금자 보유액 부족
        """
        available = self.holdings_of(sender)
        if available < amount:
            raise GatewayError(sender, amount, f"insufficient sender holdings ({available})")

        self.state.holdings[sender] = available - amount
        self.state.custody += amount
        try:
            return await splitter.receive(sender, amount)
        except Exception:
            self.state.holdings[sender] = self.holdings_of(sender) + amount
            self.state.custody -= amount
            raise

    # -------------------------------------------------------------------------
    # 지급 (IValueGateway)
    # -------------------------------------------------------------------------

    async def release(self, account: str, amount: int) -> ReleaseReceipt:
        """지급

        보관액을 수령 계정으로 이동한 뒤 on_release 훅 실행.
        훅이 예외를 던지면 이동을 되돌리고 GatewayError 발생.
        """
        if self.state.fail_next_reason is not None:
            reason = self.state.fail_next_reason
            self.state.fail_next_reason = None
            raise GatewayError(account, amount, reason)

        if account in self.state.failing_accounts:
            raise GatewayError(account, amount, self.state.failing_accounts[account])

        if self.state.custody < amount:
            raise GatewayError(account, amount, f"insufficient custody ({self.state.custody})")

        self.state.custody -= amount
        self.state.holdings[account] = self.holdings_of(account) + amount

        if self.on_release is not None:
            try:
                await self.on_release(account, amount)
            except Exception as e:
                self.state.holdings[account] = self.holdings_of(account) - amount
                self.state.custody += amount
                raise GatewayError(account, amount, f"recipient hook failed: {e}") from e

        receipt = ReleaseReceipt(
            release_id=f"mock-{uuid.uuid4()}",
            account=account,
            amount=amount,
            ts=datetime.now(timezone.utc),
        )
        self.state.releases.append(receipt)
        return receipt
