"""
타입 정의 모듈

Enum 등 핵심 타입 정의
모든 Enum은 str/int를 상속하여 그대로 직렬화 가능
"""

from enum import Enum, IntEnum


class TradingMode(str, Enum):
    """거래 모드 (실거래 / 테스트넷)"""

    PRODUCTION = "production"
    TESTNET = "testnet"


class HttpMethod(str, Enum):
    """HTTP 메서드"""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"


class SecurityType(str, Enum):
    """엔드포인트 보안 유형

    NONE: 인증 없음 (공개 API)
    API_KEY: API 키 헤더만 필요
    SIGNED: API 키 헤더 + HMAC 서명 + timestamp 필요
    """

    NONE = "NONE"
    API_KEY = "API_KEY"
    SIGNED = "SIGNED"


class DepositStatus(IntEnum):
    """입금 상태"""

    PENDING = 0
    SUCCESS = 1
    CREDITED_CANNOT_WITHDRAW = 6
    WRONG_DEPOSIT = 7
    WAITING_USER_CONFIRM = 8


class WithdrawStatus(IntEnum):
    """출금 상태"""

    EMAIL_SENT = 0
    CANCELLED = 1
    AWAITING_APPROVAL = 2
    REJECTED = 3
    PROCESSING = 4
    FAILURE = 5
    COMPLETED = 6
