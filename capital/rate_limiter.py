"""
Binance Rate Limit 관리

응답 헤더에서 Rate Limit 정보를 추적하고,
임계값 초과 시 경고 또는 요청 제한. 재시도는 하지 않음.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any

from core.constants import RateLimitThresholds

logger = logging.getLogger(__name__)

# 가중치 헤더의 집계 구간
WEIGHT_WINDOW = timedelta(minutes=1)

# 응답 헤더 -> 필드
HEADER_FIELDS = {
    "x-mbx-used-weight-1m": "used_weight_1m",
    "x-sapi-used-ip-weight-1m": "sapi_ip_weight_1m",
    "x-sapi-used-uid-weight-1m": "sapi_uid_weight_1m",
    "retry-after": "retry_after",
}


def _parse_int(name: str, value: Any) -> int | None:
    """헤더 값 -> int (숫자가 아니면 None)"""
    try:
        return int(value)
    except (TypeError, ValueError):
        logger.warning(
            "Rate limit 헤더 값 무시",
            extra={"header": name, "value": value},
        )
        return None


@dataclass
class RateLimitTracker:
    """Rate Limit 추적기

    Binance API 응답 헤더에서 Rate Limit 정보를 추출하여 추적.
    임계값 기반으로 요청 중단 여부 결정.

    Binance Rate Limit 헤더:
    - X-MBX-USED-WEIGHT-1m: 1분간 사용된 IP 가중치 (/api)
    - X-SAPI-USED-IP-WEIGHT-1m: 1분간 사용된 IP 가중치 (/sapi)
    - X-SAPI-USED-UID-WEIGHT-1m: 1분간 사용된 UID 가중치 (/sapi)
    - Retry-After: 429/418 응답 시 대기 시간 (초)
    """

    used_weight_1m: int = 0
    sapi_ip_weight_1m: int = 0
    sapi_uid_weight_1m: int = 0
    retry_after: int = 0
    last_updated: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def update_from_headers(self, headers: dict[str, Any]) -> None:
        """응답 헤더에서 Rate Limit 정보 업데이트

        숫자가 아닌 헤더 값은 무시하고 기존 값 유지.

        Args:
            headers: HTTP 응답 헤더 (대소문자 무관)
        """
        # 지난 구간의 값이 새 구간으로 넘어오지 않도록
        if self.is_stale:
            self.reset()

        headers_lower = {k.lower(): v for k, v in headers.items()}

        for header, attr in HEADER_FIELDS.items():
            raw = headers_lower.get(header)
            if raw is None:
                continue
            value = _parse_int(header, raw)
            if value is not None:
                setattr(self, attr, value)

        self.last_updated = datetime.now(timezone.utc)

    @property
    def is_stale(self) -> bool:
        """마지막 갱신 후 1분 구간이 지났는지 여부"""
        return datetime.now(timezone.utc) - self.last_updated >= WEIGHT_WINDOW

    @property
    def current_weight(self) -> int:
        """판단 기준 가중치 (IP 기준 최대값, 구간이 지나면 0)"""
        if self.is_stale:
            return 0
        return max(self.used_weight_1m, self.sapi_ip_weight_1m)

    @property
    def should_warn(self) -> bool:
        """경고 임계값 도달 여부"""
        return self.current_weight >= RateLimitThresholds.WEIGHT_WARN

    @property
    def should_slow_down(self) -> bool:
        """속도 저하 필요 여부"""
        return self.current_weight >= RateLimitThresholds.WEIGHT_SLOW

    @property
    def should_stop(self) -> bool:
        """요청 중단 필요 여부"""
        return self.current_weight >= RateLimitThresholds.WEIGHT_STOP

    @property
    def remaining_weight(self) -> int:
        """남은 가중치 (STOP 임계값 기준)"""
        return max(0, RateLimitThresholds.WEIGHT_STOP - self.current_weight)

    def reset(self) -> None:
        """카운터 리셋"""
        self.used_weight_1m = 0
        self.sapi_ip_weight_1m = 0
        self.sapi_uid_weight_1m = 0
        self.retry_after = 0
        self.last_updated = datetime.now(timezone.utc)

    def to_dict(self) -> dict[str, Any]:
        """딕셔너리로 변환 (로깅용)"""
        return {
            "used_weight_1m": self.used_weight_1m,
            "sapi_ip_weight_1m": self.sapi_ip_weight_1m,
            "sapi_uid_weight_1m": self.sapi_uid_weight_1m,
            "retry_after": self.retry_after,
            "last_updated": self.last_updated.isoformat(),
            "should_warn": self.should_warn,
            "should_stop": self.should_stop,
            "is_stale": self.is_stale,
        }
