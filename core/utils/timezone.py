"""
타임존 유틸리티

내부 처리: UTC | 외부 표시(CLI): KST 원칙 준수를 위한 헬퍼 함수
"""

import time
from datetime import datetime, timezone, timedelta

# KST 타임존 (UTC+9)
KST = timezone(timedelta(hours=9))

# Binance 출금 내역의 applyTime 형식 (UTC)
API_DATETIME_FORMAT = "%Y-%m-%d %H:%M:%S"


def to_kst(dt: datetime) -> datetime:
    """UTC datetime을 KST로 변환 (naive면 UTC로 간주)"""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(KST)


def format_kst(dt: datetime, fmt: str = "%Y-%m-%d %H:%M:%S") -> str:
    """UTC datetime을 KST 문자열로 포맷

    Example:
        >>> format_kst(datetime(2026, 2, 20, 16, 0, 0, tzinfo=timezone.utc))
        '2026-02-21 01:00:00'
    """
    return to_kst(dt).strftime(fmt)


def now_ms() -> int:
    """현재 로컬 시간 (Unix 밀리초)"""
    return int(time.time() * 1000)


def utc_from_timestamp_ms(ts_ms: int) -> datetime:
    """밀리초 타임스탬프를 UTC datetime으로 변환

    Example:
        >>> utc_from_timestamp_ms(1708444800000)
        datetime(2024, 2, 20, 16, 0, 0, tzinfo=timezone.utc)
    """
    return datetime.fromtimestamp(ts_ms / 1000, tz=timezone.utc)


def to_timestamp_ms(dt: datetime) -> int:
    """datetime을 밀리초 타임스탬프로 변환 (naive면 UTC로 간주)"""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return int(dt.timestamp() * 1000)


def parse_api_datetime(value: str) -> datetime:
    """API 날짜 문자열("2019-10-12 11:12:02")을 UTC datetime으로 변환

    Raises:
        ValueError: 형식이 맞지 않는 경우
    """
    return datetime.strptime(value, API_DATETIME_FORMAT).replace(tzinfo=timezone.utc)
