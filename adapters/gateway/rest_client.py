"""
가치 이전 게이트웨이 REST 클라이언트

외부 게이트웨이 API로 지급을 요청하는 IValueGateway 구현체.

API 규약:
- POST {base_url}/releases
- 요청: {"account": "...", "amount": "정수 문자열"}
- 응답: {"release_id": "...", "ts": "ISO 8601"}
- 인증: Authorization: Bearer {api_key}
"""

import logging
import uuid
from typing import Any

import httpx

from adapters.models import ReleaseReceipt
from core.errors import GatewayError

logger = logging.getLogger(__name__)


class HttpValueGateway:
    """게이트웨이 REST 클라이언트

    IValueGateway Protocol 구현.
    응답 코드 400 이상, 전송 오류, 응답 형식 오류는 모두 GatewayError로 변환.
    타임아웃도 실패로 처리되어 원장의 차감이 롤백됨.

    Args:
        base_url: 게이트웨이 API 주소
        api_key: API 키
        timeout: HTTP 요청 타임아웃 (초)
        transport: 테스트용 httpx 트랜스포트

    사용 예시:
    ```python
    gateway = HttpValueGateway(base_url="https://gateway.local/api", api_key="xxx")
    receipt = await gateway.release("0xabc", 500)
    await gateway.close()
    ```
    """

    def __init__(
        self,
        base_url: str,
        api_key: str,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def _ensure_client(self) -> httpx.AsyncClient:
        """HTTP 클라이언트 반환 (lazy init)"""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """HTTP 클라이언트 종료"""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def release(self, account: str, amount: int) -> ReleaseReceipt:
        """지급 요청

        Args:
            account: 수령 계정
            amount: 지급 금액

        Returns:
            지급 영수증

        Raises:
            GatewayError: 지급 실패 시
        """
        client = await self._ensure_client()
        body = {"account": account, "amount": str(amount)}
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            # 게이트웨이 측 중복 처리 방지
            "Idempotency-Key": str(uuid.uuid4()),
        }

        try:
            response = await client.post("/releases", json=body, headers=headers)
        except httpx.RequestError as e:
            logger.error(f"Gateway request error: {e}", extra={"account": account})
            raise GatewayError(account, amount, f"request error: {e}") from e

        if response.status_code >= 400:
            message = self._error_message(response)
            logger.error(
                f"Gateway API error: {response.status_code} - {message}",
                extra={"account": account, "amount": str(amount)},
            )
            raise GatewayError(account, amount, f"HTTP {response.status_code}: {message}")

        try:
            receipt = ReleaseReceipt.from_api(response.json(), account, amount)
        except ValueError as e:
            raise GatewayError(account, amount, f"invalid response: {e}") from e

        logger.info(
            f"게이트웨이 지급 완료: {account} {amount}",
            extra={"release_id": receipt.release_id},
        )
        return receipt

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        """에러 응답 본문에서 메시지 추출"""
        try:
            data: Any = response.json()
        except ValueError:
            return response.text
        if isinstance(data, dict):
            error = data.get("error")
            if isinstance(error, dict):
                return str(error.get("message", error))
            if error:
                return str(error)
            if data.get("message"):
                return str(data["message"])
        return response.text
