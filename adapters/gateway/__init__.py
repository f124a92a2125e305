"""
가치 이전 게이트웨이 어댑터

외부 게이트웨이 REST API 연동.
"""

from adapters.gateway.rest_client import HttpValueGateway

__all__ = [
    "HttpValueGateway",
]
