"""
유틸리티 패키지

타임스탬프 변환, 타임존 처리 등 공통 유틸리티
"""

from core.utils.timezone import (
    KST,
    to_kst,
    format_kst,
    now_ms,
    utc_from_timestamp_ms,
    to_timestamp_ms,
    parse_api_datetime,
)

__all__ = [
    "KST",
    "to_kst",
    "format_kst",
    "now_ms",
    "utc_from_timestamp_ms",
    "to_timestamp_ms",
    "parse_api_datetime",
]
