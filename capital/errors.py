"""
Capital API 에러 정의

요청 구성/전송/응답 해석 단계별 에러 계층.
모든 에러는 CapitalError를 상속. 취소는 asyncio.CancelledError 그대로 전파.
"""

from asyncio import CancelledError


class CapitalError(Exception):
    """Capital 클라이언트 에러 기본 클래스"""
    pass


class ConfigurationError(CapitalError):
    """설정/파라미터 에러

    API 키/시크릿 누락, startTime/endTime 짝 불일치 등.
    네트워크 요청 전에 발생.
    """
    pass


class TransportError(CapitalError):
    """전송 에러

    연결 실패, 타임아웃 등 거래소 응답을 받지 못한 경우.
    원인 예외는 __cause__ 로 연결됨.
    """
    pass


class HTTPError(CapitalError):
    """HTTP 에러 (2xx 외 상태 코드, 구조화된 에러 본문 없음)"""

    def __init__(self, status_code: int, body: bytes = b"", message: str | None = None):
        self.status_code = status_code
        self.body = body
        if message is None:
            preview = body[:200].decode("utf-8", errors="replace")
            message = f"HTTP {status_code}: {preview}"
        super().__init__(message)


class RateLimitError(HTTPError):
    """Rate Limit 초과 에러

    429/418 응답 또는 클라이언트 측 weight 임계값 도달 시 발생.
    retry_after 초 후 재시도 여부는 호출자가 결정.
    """

    def __init__(
        self,
        retry_after: int,
        status_code: int = 429,
        body: bytes = b"",
        message: str = "Rate limit exceeded",
    ):
        self.retry_after = retry_after
        self.message = message
        super().__init__(
            status_code=status_code,
            body=body,
            message=f"{message}. Retry after {retry_after} seconds.",
        )


class ApiError(CapitalError):
    """Binance API 에러

    응답 본문에 에러 코드/메시지가 담긴 경우 (예: 잔고 부족).
    HTTP 상태와 무관하게 발생.
    """

    def __init__(self, code: int, message: str, status_code: int | None = None):
        self.code = code
        self.message = message
        self.status_code = status_code
        super().__init__(f"Binance API Error [{code}]: {message}")


class MalformedResponseError(CapitalError):
    """응답 형식 에러

    JSON 파싱 실패 또는 기대한 형태와 다른 경우. 원본 본문 보존.
    """

    def __init__(self, body: bytes, reason: str = "Malformed response"):
        self.body = body
        self.reason = reason
        super().__init__(f"{reason}: {body[:200]!r}")


__all__ = [
    "CapitalError",
    "ConfigurationError",
    "TransportError",
    "HTTPError",
    "RateLimitError",
    "ApiError",
    "MalformedResponseError",
    "CancelledError",
]
