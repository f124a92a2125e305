"""
어댑터 인터페이스 정의

Protocol 기반으로 정의하여 의존성 주입 및 Mock 교체 가능.
모든 구현체는 이 Protocol을 준수해야 함.
"""

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from adapters.models import ReleaseReceipt


@runtime_checkable
class IValueGateway(Protocol):
    """가치 이전 게이트웨이 인터페이스

    인스턴스가 보유한 가치를 외부 계정으로 실제 이동시키는 외부 협력자.
    release() 도중 임의의 외부 로직이 실행될 수 있으며,
    그 로직이 원장의 공개 연산을 다시 호출(재진입)할 수 있음.
    금액은 반드시 최소 단위 정수(int) 사용.
    """

    async def release(self, account: str, amount: int) -> "ReleaseReceipt":
        """가치 지급

        Args:
            account: 수령 계정
            amount: 지급 금액

        Returns:
            지급 영수증

        Raises:
            GatewayError: 지급 실패 시 (용량 부족, 거부 등)
        """
        ...
