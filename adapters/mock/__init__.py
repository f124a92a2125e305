"""
Mock 어댑터

테스트용 Mock 구현체 제공.
"""

from adapters.mock.gateway import MockGatewayState, MockValueGateway

__all__ = [
    "MockGatewayState",
    "MockValueGateway",
]
