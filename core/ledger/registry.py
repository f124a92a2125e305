"""
PercentageRegistry - 수령인 지분 목록

등록 순서를 유지하는 (account, share) 목록.
지분 합계는 항상 10000(100%) 이하로 유지됨.
"""

import logging
from typing import Iterable, Iterator

from core.constants import ShareLimits
from core.errors import ConfigurationError
from core.ledger.types import RecipientShare

logger = logging.getLogger(__name__)

SHARE_OVERFLOW_MESSAGE = "Cannot add Recipient, percentage would be greater than 100%"


def validate_recipient(account: object, share: object) -> None:
    """수령인 값 검증

    Raises:
        ConfigurationError: 계정이 빈 문자열이거나 지분이 1~10000 정수가 아닌 경우
    """
    if not isinstance(account, str) or not account:
        raise ConfigurationError(f"Recipient account must be a non-empty string, got {account!r}")

    # bool은 int의 서브클래스이므로 별도 차단
    if isinstance(share, bool) or not isinstance(share, int):
        raise ConfigurationError(f"Recipient share must be an integer, got {share!r}")

    if not ShareLimits.MIN_SHARE <= share <= ShareLimits.MAX_SHARE:
        raise ConfigurationError(
            f"Recipient share must be between {ShareLimits.MIN_SHARE} "
            f"and {ShareLimits.MAX_SHARE}, got {share}"
        )


class PercentageRegistry:
    """수령인 지분 레지스트리

    인스턴스가 소유하는 수령인 목록. 개별 삭제는 없고 전체 초기화만 가능.
    변경은 검증 후 한 번에 반영되므로 합계가 100%를 넘는 상태는 관찰되지 않음.

    사용 예시:
    ```python
    registry = PercentageRegistry()
    registry.add_recipient("0xabc", 5000)
    registry.add_recipient("0xdef", 5000)

    registry.total_share  # 10000
    registry.list_recipients()  # [RecipientShare("0xabc", 5000), ...]
    ```
    """

    def __init__(self) -> None:
        self._recipients: list[RecipientShare] = []

    @property
    def total_share(self) -> int:
        """등록된 지분 합계"""
        return sum(r.share for r in self._recipients)

    @property
    def remaining_share(self) -> int:
        """추가 가능한 지분"""
        return ShareLimits.SCALE - self.total_share

    def add_recipient(self, account: str, share: int) -> RecipientShare:
        """수령인 추가

        Args:
            account: 수령 계정
            share: 지분 (basis point)

        Returns:
            추가된 RecipientShare

        Raises:
            ConfigurationError: 합계가 100%를 넘거나 값이 유효하지 않은 경우
        """
        validate_recipient(account, share)

        if self.total_share + share > ShareLimits.SCALE:
            logger.warning(
                "수령인 추가 거부 (지분 합계 초과)",
                extra={"account": account, "share": share, "total": self.total_share},
            )
            raise ConfigurationError(SHARE_OVERFLOW_MESSAGE)

        recipient = RecipientShare(account=account, share=share)
        self._recipients.append(recipient)

        logger.info(
            f"수령인 추가: {account} ({share} bp)",
            extra={"total": self.total_share},
        )
        return recipient

    def remove_all_recipients(self) -> int:
        """수령인 전체 삭제

        이미 적립된 잔고에는 영향 없음.

        Returns:
            삭제된 항목 수
        """
        removed = len(self._recipients)
        self._recipients.clear()

        logger.info(f"수령인 전체 삭제: {removed}건")
        return removed

    def list_recipients(self, as_of: str | None = None) -> list[RecipientShare]:
        """수령인 목록 조회 (등록 순서)

        Args:
            as_of: 조회 기준 계정. 현재 결과에 영향 없음 (인스턴스 전역 목록 반환)

        Returns:
            RecipientShare 리스트 (복사본)
        """
        return list(self._recipients)

    def accounts(self) -> list[str]:
        """중복 제거된 수령 계정 목록 (최초 등록 순서)"""
        return list(dict.fromkeys(r.account for r in self._recipients))

    def restore(self, recipients: Iterable[RecipientShare]) -> None:
        """저장된 목록으로 교체 (DB 로드용)

        전체를 검증한 뒤 교체하므로 실패 시 기존 목록 유지.

        Raises:
            ConfigurationError: 항목이 유효하지 않거나 합계가 100%를 넘는 경우
        """
        items = list(recipients)
        for item in items:
            validate_recipient(item.account, item.share)

        if sum(item.share for item in items) > ShareLimits.SCALE:
            raise ConfigurationError(SHARE_OVERFLOW_MESSAGE)

        self._recipients = items

    def __len__(self) -> int:
        return len(self._recipients)

    def __iter__(self) -> Iterator[RecipientShare]:
        return iter(list(self._recipients))
