"""
요청 전송기 (Dispatcher)

RequestDescriptor -> HTTP 요청 변환 및 전송.
- SIGNED 요청은 서버 시간 오프셋이 적용된 timestamp로 서명
- GET/DELETE: 쿼리 문자열 / POST/PUT: form-urlencoded 본문
- 재시도 없음 (호출자 책임)
"""

import asyncio
import logging
from typing import Any

import httpx

from core.config.loader import ClientConfig
from core.constants import CapitalPaths, Headers
from core.types import HttpMethod
from core.utils.timezone import now_ms
from capital.decoder import ApiResponse, decode
from capital.errors import ConfigurationError, RateLimitError, TransportError
from capital.models import parse_server_time
from capital.rate_limiter import RateLimitTracker
from capital.request import RequestDescriptor
from capital.signer import build_signed_query

logger = logging.getLogger(__name__)


class Dispatcher:
    """서명/전송 담당

    여러 코루틴이 동시에 dispatch()를 호출해도 안전.
    공유 상태는 httpx 커넥션 풀, 서버 시간 오프셋, Rate Limit 카운터뿐.

    Args:
        http_client: 외부에서 주입할 httpx.AsyncClient (None이면 lazy 생성)
    """

    def __init__(self, http_client: httpx.AsyncClient | None = None):
        self._client = http_client
        self._owns_client = http_client is None
        self.rate_tracker = RateLimitTracker()

        # 서버 시간 동기화용 오프셋 (밀리초)
        self._time_offset: int = 0
        self._time_synced: bool = False
        self._sync_lock = asyncio.Lock()

    async def _get_client(self) -> httpx.AsyncClient:
        """HTTP 클라이언트 가져오기 (lazy initialization)"""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient()
            self._owns_client = True
        return self._client

    async def close(self) -> None:
        """HTTP 클라이언트 종료 (직접 생성한 경우만)"""
        if self._owns_client and self._client is not None and not self._client.is_closed:
            await self._client.aclose()
        self._client = None

    # -------------------------------------------------------------------------
    # 서버 시간
    # -------------------------------------------------------------------------

    @property
    def time_offset(self) -> int:
        """서버 시간 - 로컬 시간 (밀리초)"""
        return self._time_offset

    def _get_timestamp(self) -> int:
        """서버 시간 오프셋이 적용된 타임스탬프 반환 (밀리초)"""
        return now_ms() + self._time_offset

    async def sync_time(self, config: ClientConfig) -> int:
        """서버 시간과 동기화

        로컬 시간과 서버 시간의 차이를 계산하여 오프셋 저장.

        Returns:
            계산된 시간 오프셋 (밀리초)
        """
        local_time = now_ms()
        response = await self.dispatch(
            RequestDescriptor.public(HttpMethod.GET, CapitalPaths.SERVER_TIME),
            config,
        )
        server_time = decode(response, parse_server_time)
        self._time_offset = server_time - local_time
        self._time_synced = True

        logger.info(
            "서버 시간 동기화 완료",
            extra={"offset_ms": self._time_offset},
        )

        return self._time_offset

    async def _ensure_time_synced(self, config: ClientConfig) -> None:
        """시간 동기화가 필요하면 수행 (동시 호출 시 1회만)"""
        if self._time_synced:
            return
        async with self._sync_lock:
            if not self._time_synced:
                await self.sync_time(config)

    # -------------------------------------------------------------------------
    # 전송
    # -------------------------------------------------------------------------

    def _build_headers(self, descriptor: RequestDescriptor, config: ClientConfig) -> dict[str, str]:
        headers: dict[str, str] = {}
        if descriptor.requires_api_key:
            if not config.api_key:
                raise ConfigurationError(
                    f"API key is required for {descriptor.security_type.value} request"
                )
            headers[Headers.API_KEY] = config.api_key
        if descriptor.params_in_body:
            headers[Headers.CONTENT_TYPE] = Headers.FORM_URLENCODED
        return headers

    async def _build_payload(self, descriptor: RequestDescriptor, config: ClientConfig) -> str:
        if not descriptor.requires_signature:
            return descriptor.params.encode()

        if not config.api_secret:
            raise ConfigurationError("API secret is required for SIGNED request")

        await self._ensure_time_synced(config)
        return build_signed_query(
            descriptor.params,
            config.api_secret,
            self._get_timestamp(),
            config.recv_window,
        )

    async def dispatch(self, descriptor: RequestDescriptor, config: ClientConfig) -> ApiResponse:
        """API 요청 전송

        Args:
            descriptor: 요청 기술자
            config: 클라이언트 설정 (API 키/시크릿, 베이스 URL)

        Returns:
            ApiResponse (상태 코드와 무관하게 반환, 해석은 decoder 담당)

        Raises:
            ConfigurationError: API 키/시크릿 누락 (전송 전)
            RateLimitError: 클라이언트 측 weight 임계값 도달 (전송 전)
            TransportError: 연결 실패/타임아웃
            asyncio.CancelledError: 호출자가 취소한 경우 (그대로 전파)
        """
        if self.rate_tracker.should_stop:
            logger.warning(
                "Rate limit threshold reached",
                extra={"rate_info": self.rate_tracker.to_dict()},
            )
            raise RateLimitError(
                retry_after=60,
                message="Request weight threshold reached",
            )

        headers = self._build_headers(descriptor, config)
        payload = await self._build_payload(descriptor, config)

        url = f"{config.base_url.rstrip('/')}{descriptor.endpoint}"
        content: bytes | None = None
        # 서명된 문자열을 그대로 전송 (httpx params 재인코딩 금지)
        if descriptor.params_in_body:
            content = payload.encode("utf-8")
        elif payload:
            url = f"{url}?{payload}"

        client = await self._get_client()
        log_extra: dict[str, Any] = {
            "method": descriptor.method.value,
            "path": descriptor.endpoint,
            "security": descriptor.security_type.value,
        }
        logger.debug("Request", extra=log_extra)

        try:
            response = await client.request(
                descriptor.method.value,
                url,
                content=content,
                headers=headers,
                timeout=config.timeout,
            )
        except asyncio.CancelledError:
            logger.info("Request cancelled", extra=log_extra)
            raise
        except httpx.TimeoutException as e:
            logger.warning("Request timeout", extra=log_extra)
            raise TransportError(f"Request timeout: {descriptor.endpoint}") from e
        except httpx.RequestError as e:
            logger.error(
                "Request error",
                extra={**log_extra, "error": str(e)},
            )
            raise TransportError(f"Request failed: {descriptor.endpoint}: {e}") from e

        response_headers = dict(response.headers)
        self.rate_tracker.update_from_headers(response_headers)
        if self.rate_tracker.should_warn:
            logger.warning(
                "Rate limit warning",
                extra={"rate_info": self.rate_tracker.to_dict()},
            )

        return ApiResponse(
            status_code=response.status_code,
            body=response.content,
            headers=response_headers,
        )

    async def __aenter__(self) -> "Dispatcher":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()
