"""
요청 기술자 (RequestDescriptor)

API 호출 1건을 기술하는 불변 값. 호출마다 새로 생성.
"""

from dataclasses import dataclass, field

from core.types import HttpMethod, SecurityType
from capital.params import ParameterSet


@dataclass(frozen=True)
class RequestDescriptor:
    """API 호출 기술자

    Attributes:
        method: HTTP 메서드
        endpoint: API 경로 (예: /sapi/v1/capital/deposit/address)
        security_type: 보안 유형 (NONE / API_KEY / SIGNED)
        params: 요청 파라미터 (생성 시 복사본 보관)
    """

    method: HttpMethod
    endpoint: str
    security_type: SecurityType = SecurityType.NONE
    params: ParameterSet = field(default_factory=ParameterSet)

    def __post_init__(self) -> None:
        if not self.endpoint.startswith("/"):
            raise ValueError(f"endpoint must start with '/': {self.endpoint}")
        # 문자열로 넘어온 경우 Enum으로 정규화
        object.__setattr__(self, "method", HttpMethod(self.method))
        object.__setattr__(self, "security_type", SecurityType(self.security_type))
        # 이후 호출자가 원본을 수정해도 영향 없도록 복사
        object.__setattr__(self, "params", self.params.copy())

    @property
    def params_in_body(self) -> bool:
        """파라미터를 본문으로 보내는지 여부 (POST/PUT)"""
        return self.method in (HttpMethod.POST, HttpMethod.PUT)

    @property
    def requires_api_key(self) -> bool:
        return self.security_type in (SecurityType.API_KEY, SecurityType.SIGNED)

    @property
    def requires_signature(self) -> bool:
        return self.security_type == SecurityType.SIGNED

    @classmethod
    def public(
        cls,
        method: HttpMethod,
        endpoint: str,
        params: ParameterSet | None = None,
    ) -> "RequestDescriptor":
        """공개 API 요청"""
        return cls(method, endpoint, SecurityType.NONE, params or ParameterSet())

    @classmethod
    def api_key_only(
        cls,
        method: HttpMethod,
        endpoint: str,
        params: ParameterSet | None = None,
    ) -> "RequestDescriptor":
        """API 키 헤더만 필요한 요청"""
        return cls(method, endpoint, SecurityType.API_KEY, params or ParameterSet())

    @classmethod
    def signed(
        cls,
        method: HttpMethod,
        endpoint: str,
        params: ParameterSet | None = None,
    ) -> "RequestDescriptor":
        """서명 요청 (USER_DATA)"""
        return cls(method, endpoint, SecurityType.SIGNED, params or ParameterSet())
