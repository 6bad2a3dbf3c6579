"""
HMAC-SHA256 요청 서명

서명은 전송될 문자열 그대로에 대해 계산.
build_signed_query() 결과를 다시 인코딩하지 않고 그대로 전송해야 함.
"""

import hashlib
import hmac

from capital.errors import ConfigurationError
from capital.params import ParameterSet

TIMESTAMP_PARAM = "timestamp"
RECV_WINDOW_PARAM = "recvWindow"
SIGNATURE_PARAM = "signature"


def _secret_bytes(secret: str | bytes) -> bytes:
    if not secret:
        raise ConfigurationError("API secret is required for signed requests")
    if isinstance(secret, str):
        return secret.encode("utf-8")
    return secret


def generate_signature(secret: str | bytes, message: str) -> str:
    """HMAC-SHA256 서명 생성

    Args:
        secret: API 시크릿
        message: 서명 대상 문자열 (URL 인코딩된 쿼리)

    Returns:
        16진수 서명 문자열 (64자)

    Raises:
        ConfigurationError: 시크릿이 비어 있는 경우
    """
    return hmac.new(
        _secret_bytes(secret),
        message.encode("utf-8"),
        hashlib.sha256,
    ).hexdigest()


def _with_timing(
    params: ParameterSet,
    timestamp: int,
    recv_window: int | None,
) -> ParameterSet:
    # 원본은 건드리지 않음
    timed = params.copy()
    timed.set(TIMESTAMP_PARAM, timestamp)
    timed.set_if_present(RECV_WINDOW_PARAM, recv_window)
    return timed


def sign(
    params: ParameterSet,
    secret: str | bytes,
    timestamp: int,
    recv_window: int | None = None,
) -> str:
    """파라미터 + timestamp (+ recvWindow) 에 대한 서명 계산

    동일 입력이면 항상 동일 서명 (순수 함수).
    """
    return generate_signature(secret, _with_timing(params, timestamp, recv_window).encode())


def build_signed_query(
    params: ParameterSet,
    secret: str | bytes,
    timestamp: int,
    recv_window: int | None = None,
) -> str:
    """전송용 서명 쿼리 문자열 생성

    형식: <params>&timestamp=<ms>[&recvWindow=<ms>]&signature=<hex>

    Returns:
        서명이 덧붙은 최종 쿼리 문자열 (GET/DELETE는 URL, POST/PUT은 본문)
    """
    query_string = _with_timing(params, timestamp, recv_window).encode()
    signature = generate_signature(secret, query_string)
    return f"{query_string}&{SIGNATURE_PARAM}={signature}"
