"""
요청 파라미터 집합

삽입 순서를 유지하는 key -> value 매핑.
encode() 결과가 그대로 서명 대상이자 전송 문자열이 되므로 항상 결정적이어야 함.
"""

import math
from decimal import Decimal
from typing import Any, Iterator
from urllib.parse import urlencode

ParamValue = str | int | float | bool | Decimal


def format_value(value: ParamValue) -> str:
    """파라미터 값을 전송용 문자열로 변환

    - bool: "true" / "false"
    - Decimal: 지수 표기 없이 그대로 (예: Decimal("1E-8") -> "0.00000001")
    - float: 최단 repr 기준, 지수 표기 없이
    - int / str: 그대로

    Raises:
        TypeError: 지원하지 않는 타입
        ValueError: NaN/Infinity
    """
    # bool은 int의 하위 타입이므로 먼저 확인
    if isinstance(value, bool):
        return "true" if value else "false"

    if isinstance(value, Decimal):
        if not value.is_finite():
            raise ValueError(f"non-finite decimal: {value}")
        return format(value, "f")

    if isinstance(value, float):
        if not math.isfinite(value):
            raise ValueError(f"non-finite float: {value}")
        return format(Decimal(repr(value)), "f")

    if isinstance(value, (int, str)):
        return str(value)

    raise TypeError(f"unsupported parameter type: {type(value).__name__}")


class ParameterSet:
    """순서 있는 요청 파라미터 집합

    호출자가 명시적으로 설정한 값만 포함 (None은 부재를 의미).

    사용 예:
        params = ParameterSet()
        params.set("coin", "ETH")
        params.set_if_present("status", query.status)  # None이면 생략
        params.encode()  # "coin=ETH&status=0"
    """

    __slots__ = ("_items",)

    def __init__(self, items: dict[str, ParamValue] | None = None):
        self._items: dict[str, ParamValue] = {}
        if items:
            for key, value in items.items():
                self.set(key, value)

    def set(self, key: str, value: ParamValue) -> "ParameterSet":
        """값 설정 (기존 키면 위치 유지한 채 덮어쓰기)"""
        if not isinstance(key, str) or not key:
            raise TypeError("parameter key must be a non-empty string")
        if value is None:
            raise TypeError(f"parameter '{key}' is None; use set_if_present()")
        # 타입 검증 (encode 시점이 아닌 설정 시점에 실패)
        format_value(value)
        self._items[key] = value
        return self

    def set_if_present(self, key: str, value: ParamValue | None) -> "ParameterSet":
        """값이 None이 아닐 때만 설정

        0, False, "" 는 값으로 취급하여 설정.
        """
        if value is not None:
            self.set(key, value)
        return self

    def merge(self, other: "ParameterSet") -> "ParameterSet":
        """두 집합을 합친 새 집합 반환 (충돌 시 other 우선)"""
        merged = self.copy()
        for key, value in other.items():
            merged.set(key, value)
        return merged

    def copy(self) -> "ParameterSet":
        """얕은 복사 (값은 모두 불변 타입)"""
        clone = ParameterSet()
        clone._items = dict(self._items)
        return clone

    def encode(self) -> str:
        """삽입 순서대로 key=value&... 문자열 생성 (URL 인코딩 포함)"""
        return urlencode([(key, format_value(value)) for key, value in self._items.items()])

    def items(self) -> Iterator[tuple[str, ParamValue]]:
        return iter(self._items.items())

    def keys(self) -> list[str]:
        return list(self._items)

    def to_dict(self) -> dict[str, ParamValue]:
        """딕셔너리로 변환 (로깅/디버깅용)"""
        return dict(self._items)

    def __getitem__(self, key: str) -> ParamValue:
        return self._items[key]

    def __contains__(self, key: object) -> bool:
        return key in self._items

    def __len__(self) -> int:
        return len(self._items)

    def __bool__(self) -> bool:
        return bool(self._items)

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, ParameterSet):
            return NotImplemented
        # 순서까지 비교 (서명이 순서에 의존)
        return list(self._items.items()) == list(other._items.items())

    def __repr__(self) -> str:
        return f"ParameterSet({self._items!r})"
