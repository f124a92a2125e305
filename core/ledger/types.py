"""
분배 원장 타입 정의

수령인 지분(RecipientShare) 등 원장 전반에서 사용하는 값 객체
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class RecipientShare:
    """수령인 지분 (불변)

    share는 basis point (10000 = 100.00%).
    같은 계정이 여러 번 등록될 수 있으며 각각 독립적으로 합산됨.
    """

    account: str
    share: int
