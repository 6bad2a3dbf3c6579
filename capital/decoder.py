"""
응답 해석기 (Response Decoder)

HTTP 응답 본문 -> 타입 모델 또는 구조화된 에러.
- JSON 소수는 Decimal로 파싱 (float 경유 금지)
- 본문에 에러 코드/메시지가 있으면 HTTP 상태와 무관하게 ApiError
- 목록 응답은 전부 성공 또는 전부 실패 (레코드 누락 없음)
"""

import json
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Any, Callable, TypeVar

from capital.errors import (
    ApiError,
    HTTPError,
    MalformedResponseError,
    RateLimitError,
)

T = TypeVar("T")

# 응답 본문의 code 중 성공으로 취급하는 값 (accountSnapshot 등은 200 포함)
SUCCESS_CODES = (0, 200)

# Rate Limit 응답 상태 코드 (418: IP 차단)
RATE_LIMIT_STATUSES = (418, 429)
DEFAULT_RETRY_AFTER_SEC = 60


@dataclass(frozen=True)
class ApiResponse:
    """HTTP 응답 원본 (상태 코드 + 본문 바이트)"""

    status_code: int
    body: bytes
    headers: dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        """2xx 여부"""
        return 200 <= self.status_code < 300


def parse_json(body: bytes) -> Any:
    """JSON 파싱 (소수는 Decimal)

    Raises:
        MalformedResponseError: JSON이 아닌 경우
    """
    try:
        return json.loads(body, parse_float=Decimal)
    except ValueError as e:
        # JSONDecodeError, UnicodeDecodeError 모두 ValueError 하위
        raise MalformedResponseError(body, "Invalid JSON") from e


def raise_for_envelope(data: Any, status_code: int | None = None) -> None:
    """응답 본문의 에러 표시 확인

    에러 형식:
        {"code": -1102, "msg": "Mandatory parameter 'coin' was not sent"}
        {"success": false, "msg": "..."}

    Raises:
        ApiError: 본문이 실패를 나타내는 경우
    """
    if not isinstance(data, dict):
        return

    code = data.get("code")
    has_code = isinstance(code, int) and not isinstance(code, bool)

    if data.get("success") is False:
        raise ApiError(
            code=code if has_code else -1,
            message=str(data.get("msg", "")),
            status_code=status_code,
        )

    if has_code and code not in SUCCESS_CODES and "msg" in data:
        raise ApiError(code=code, message=str(data["msg"]), status_code=status_code)


def _retry_after(headers: dict[str, str]) -> int:
    for key, value in headers.items():
        if key.lower() == "retry-after":
            try:
                return int(value)
            except ValueError:
                break
    return DEFAULT_RETRY_AFTER_SEC


def decode(response: ApiResponse, parser: Callable[[Any], T]) -> T:
    """응답 해석

    Args:
        response: Dispatcher가 반환한 원본 응답
        parser: JSON 데이터 -> 모델 변환 함수

    Returns:
        parser 결과

    Raises:
        RateLimitError: 429/418 응답
        ApiError: 본문에 에러 코드가 있는 경우
        HTTPError: 2xx가 아니고 구조화된 에러가 없는 경우
        MalformedResponseError: JSON 파싱 실패 또는 형태 불일치
    """
    if response.status_code in RATE_LIMIT_STATUSES:
        raise RateLimitError(
            retry_after=_retry_after(response.headers),
            status_code=response.status_code,
            body=response.body,
        )

    try:
        data = parse_json(response.body)
    except MalformedResponseError as e:
        if not response.ok:
            raise HTTPError(response.status_code, response.body) from e
        raise

    raise_for_envelope(data, response.status_code)

    if not response.ok:
        raise HTTPError(response.status_code, response.body)

    try:
        return parser(data)
    except (KeyError, TypeError, ValueError, InvalidOperation) as e:
        raise MalformedResponseError(
            response.body,
            f"Unexpected response shape ({type(e).__name__}: {e})",
        ) from e


def unwrap_list(data: Any, key: str) -> list[Any]:
    """목록 응답 추출

    배열 그대로 또는 {"success": true, "<key>": [...]} 형태 모두 허용.

    Raises:
        TypeError: 목록을 찾을 수 없는 경우
    """
    if isinstance(data, list):
        return data
    if isinstance(data, dict) and isinstance(data.get(key), list):
        return data[key]
    raise TypeError(f"expected a JSON array or '{key}' envelope")
