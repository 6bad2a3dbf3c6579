"""
Binance Capital(입출금) 클라이언트

서명 요청 구성/전송 및 응답 해석.
HMAC-SHA256 서명, Decimal 금액, 구조화된 에러.
"""

from capital.client import CapitalClient
from capital.decoder import ApiResponse, decode
from capital.dispatcher import Dispatcher
from capital.errors import (
    ApiError,
    CancelledError,
    CapitalError,
    ConfigurationError,
    HTTPError,
    MalformedResponseError,
    RateLimitError,
    TransportError,
)
from capital.interfaces import ICapitalClient
from capital.models import Deposit, DepositAddress, Withdrawal, WithdrawResult
from capital.params import ParameterSet
from capital.queries import (
    DepositAddressQuery,
    DepositHistoryQuery,
    WithdrawHistoryQuery,
    WithdrawRequest,
)
from capital.request import RequestDescriptor
from capital.signer import build_signed_query, sign

__all__ = [
    # Client
    "CapitalClient",
    "ICapitalClient",
    "Dispatcher",
    # Request / Response
    "ParameterSet",
    "RequestDescriptor",
    "ApiResponse",
    "decode",
    "sign",
    "build_signed_query",
    # Queries
    "DepositHistoryQuery",
    "DepositAddressQuery",
    "WithdrawRequest",
    "WithdrawHistoryQuery",
    # Models
    "Deposit",
    "DepositAddress",
    "Withdrawal",
    "WithdrawResult",
    # Errors
    "CapitalError",
    "ConfigurationError",
    "TransportError",
    "HTTPError",
    "RateLimitError",
    "ApiError",
    "MalformedResponseError",
    "CancelledError",
]
