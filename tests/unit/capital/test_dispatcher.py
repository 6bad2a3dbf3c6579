"""
Dispatcher 테스트

보안 유형별 헤더/서명, 메서드별 파라미터 위치, 전송 에러, 취소, 시간 동기화 테스트
(httpx mock 사용).
"""

import asyncio
from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, patch

import httpx
import pytest

from core.config.loader import ClientConfig
from core.types import HttpMethod
from capital.dispatcher import Dispatcher
from capital.errors import ConfigurationError, RateLimitError, TransportError
from capital.params import ParameterSet
from capital.request import RequestDescriptor
from capital.signer import generate_signature

FIXED_NOW_MS = 1499827319559


def _withdraw_history_descriptor() -> RequestDescriptor:
    params = ParameterSet()
    params.set("coin", "ETH")
    params.set("status", 0)
    params.set("startTime", 1508198532000)
    params.set("endTime", 1508198532001)
    return RequestDescriptor.signed(HttpMethod.GET, "/sapi/v1/capital/withdraw/history", params)


class TestDispatcherSigned:
    """SIGNED 요청 테스트"""

    @pytest.mark.asyncio
    async def test_signed_get_query_string(
        self,
        dispatcher: Dispatcher,
        client_config: ClientConfig,
        make_http_response,
    ) -> None:
        """GET: 파라미터 + timestamp + recvWindow + signature 가 URL에 그대로"""
        with patch.object(dispatcher, "_get_client") as mock_get_client, \
                patch("capital.dispatcher.now_ms", return_value=FIXED_NOW_MS):
            mock_http_client = AsyncMock()
            mock_http_client.request.return_value = make_http_response(b"[]")
            mock_get_client.return_value = mock_http_client

            response = await dispatcher.dispatch(_withdraw_history_descriptor(), client_config)

            assert response.status_code == 200
            assert response.body == b"[]"

            call = mock_http_client.request.call_args
            method, url = call.args
            assert method == "GET"
            assert call.kwargs["content"] is None
            assert call.kwargs["headers"]["X-MBX-APIKEY"] == "test_api_key"

            base, query = url.split("?", 1)
            assert base == "https://api.binance.com/sapi/v1/capital/withdraw/history"

            signed_part, signature = query.rsplit("&signature=", 1)
            assert signed_part == (
                "coin=ETH&status=0&startTime=1508198532000&endTime=1508198532001"
                f"&timestamp={FIXED_NOW_MS}&recvWindow=5000"
            )
            assert signature == generate_signature("test_secret_key", signed_part)

    @pytest.mark.asyncio
    async def test_signed_post_body(
        self,
        dispatcher: Dispatcher,
        client_config: ClientConfig,
        make_http_response,
    ) -> None:
        """POST: 서명된 문자열을 form 본문으로"""
        params = ParameterSet({"coin": "USDT", "address": "myaddress", "amount": "0.01"})
        descriptor = RequestDescriptor.signed(HttpMethod.POST, "/sapi/v1/capital/withdraw/apply", params)

        with patch.object(dispatcher, "_get_client") as mock_get_client, \
                patch("capital.dispatcher.now_ms", return_value=FIXED_NOW_MS):
            mock_http_client = AsyncMock()
            mock_http_client.request.return_value = make_http_response({"id": "abc"})
            mock_get_client.return_value = mock_http_client

            await dispatcher.dispatch(descriptor, client_config)

            call = mock_http_client.request.call_args
            method, url = call.args
            assert method == "POST"
            assert url == "https://api.binance.com/sapi/v1/capital/withdraw/apply"
            assert call.kwargs["headers"]["Content-Type"] == "application/x-www-form-urlencoded"

            body = call.kwargs["content"].decode("utf-8")
            signed_part, signature = body.rsplit("&signature=", 1)
            assert signed_part == (
                f"coin=USDT&address=myaddress&amount=0.01&timestamp={FIXED_NOW_MS}&recvWindow=5000"
            )
            assert signature == generate_signature("test_secret_key", signed_part)

    @pytest.mark.asyncio
    async def test_signed_without_recv_window(
        self,
        dispatcher: Dispatcher,
        make_http_response,
    ) -> None:
        config = ClientConfig(
            base_url="https://api.binance.com",
            api_key="k",
            api_secret="s",
            recv_window=None,
        )

        with patch.object(dispatcher, "_get_client") as mock_get_client, \
                patch("capital.dispatcher.now_ms", return_value=FIXED_NOW_MS):
            mock_http_client = AsyncMock()
            mock_http_client.request.return_value = make_http_response(b"[]")
            mock_get_client.return_value = mock_http_client

            await dispatcher.dispatch(
                RequestDescriptor.signed(HttpMethod.GET, "/x"),
                config,
            )

            url = mock_http_client.request.call_args.args[1]
            assert "recvWindow" not in url
            assert f"?timestamp={FIXED_NOW_MS}&signature=" in url

    @pytest.mark.asyncio
    async def test_descriptor_params_unchanged(
        self,
        dispatcher: Dispatcher,
        client_config: ClientConfig,
        make_http_response,
    ) -> None:
        """전송 후에도 기술자의 파라미터는 그대로"""
        descriptor = _withdraw_history_descriptor()

        with patch.object(dispatcher, "_get_client") as mock_get_client:
            mock_http_client = AsyncMock()
            mock_http_client.request.return_value = make_http_response(b"[]")
            mock_get_client.return_value = mock_http_client

            await dispatcher.dispatch(descriptor, client_config)

        assert "signature" not in descriptor.params
        assert "timestamp" not in descriptor.params


class TestDispatcherSecurity:
    """보안 유형별 헤더 테스트"""

    @pytest.mark.asyncio
    async def test_public_has_no_api_key(
        self,
        dispatcher: Dispatcher,
        client_config: ClientConfig,
        make_http_response,
    ) -> None:
        with patch.object(dispatcher, "_get_client") as mock_get_client:
            mock_http_client = AsyncMock()
            mock_http_client.request.return_value = make_http_response({"serverTime": 1})
            mock_get_client.return_value = mock_http_client

            await dispatcher.dispatch(
                RequestDescriptor.public(HttpMethod.GET, "/api/v3/time"),
                client_config,
            )

            call = mock_http_client.request.call_args
            assert call.args[1] == "https://api.binance.com/api/v3/time"
            assert "X-MBX-APIKEY" not in call.kwargs["headers"]

    @pytest.mark.asyncio
    async def test_api_key_only_has_no_signature(
        self,
        dispatcher: Dispatcher,
        client_config: ClientConfig,
        make_http_response,
    ) -> None:
        params = ParameterSet({"listenKey": "abc"})

        with patch.object(dispatcher, "_get_client") as mock_get_client:
            mock_http_client = AsyncMock()
            mock_http_client.request.return_value = make_http_response({})
            mock_get_client.return_value = mock_http_client

            await dispatcher.dispatch(
                RequestDescriptor.api_key_only(HttpMethod.DELETE, "/api/v3/userDataStream", params),
                client_config,
            )

            call = mock_http_client.request.call_args
            assert call.args[1] == "https://api.binance.com/api/v3/userDataStream?listenKey=abc"
            assert call.kwargs["headers"]["X-MBX-APIKEY"] == "test_api_key"

    @pytest.mark.asyncio
    async def test_missing_secret_fails_before_io(self, make_http_response) -> None:
        """시크릿 누락 시 전송/시간 동기화 없이 실패"""
        dispatcher = Dispatcher()  # 시간 미동기화 상태
        config = ClientConfig(base_url="https://api.binance.com", api_key="k", api_secret="")

        with patch.object(dispatcher, "_get_client") as mock_get_client:
            mock_http_client = AsyncMock()
            mock_get_client.return_value = mock_http_client

            with pytest.raises(ConfigurationError):
                await dispatcher.dispatch(
                    RequestDescriptor.signed(HttpMethod.GET, "/x"),
                    config,
                )

            mock_http_client.request.assert_not_called()

    @pytest.mark.asyncio
    async def test_missing_api_key_fails_before_io(self, dispatcher: Dispatcher) -> None:
        config = ClientConfig(base_url="https://api.binance.com", api_key="", api_secret="s")

        with patch.object(dispatcher, "_get_client") as mock_get_client:
            mock_http_client = AsyncMock()
            mock_get_client.return_value = mock_http_client

            with pytest.raises(ConfigurationError):
                await dispatcher.dispatch(
                    RequestDescriptor.api_key_only(HttpMethod.GET, "/x"),
                    config,
                )

            mock_http_client.request.assert_not_called()


class TestDispatcherErrors:
    """전송 에러 / 취소 테스트"""

    @pytest.mark.asyncio
    async def test_connect_error_becomes_transport_error(
        self,
        dispatcher: Dispatcher,
        client_config: ClientConfig,
    ) -> None:
        with patch.object(dispatcher, "_get_client") as mock_get_client:
            mock_http_client = AsyncMock()
            mock_http_client.request.side_effect = httpx.ConnectError("connection refused")
            mock_get_client.return_value = mock_http_client

            with pytest.raises(TransportError) as exc_info:
                await dispatcher.dispatch(_withdraw_history_descriptor(), client_config)

            assert isinstance(exc_info.value.__cause__, httpx.ConnectError)
            # 재시도 없음
            assert mock_http_client.request.call_count == 1

    @pytest.mark.asyncio
    async def test_timeout_becomes_transport_error(
        self,
        dispatcher: Dispatcher,
        client_config: ClientConfig,
    ) -> None:
        with patch.object(dispatcher, "_get_client") as mock_get_client:
            mock_http_client = AsyncMock()
            mock_http_client.request.side_effect = httpx.ReadTimeout("timed out")
            mock_get_client.return_value = mock_http_client

            with pytest.raises(TransportError):
                await dispatcher.dispatch(_withdraw_history_descriptor(), client_config)

            assert mock_http_client.request.call_count == 1

    @pytest.mark.asyncio
    async def test_error_status_returned_not_raised(
        self,
        dispatcher: Dispatcher,
        client_config: ClientConfig,
        make_http_response,
    ) -> None:
        """상태 코드 해석은 decoder 담당"""
        with patch.object(dispatcher, "_get_client") as mock_get_client:
            mock_http_client = AsyncMock()
            mock_http_client.request.return_value = make_http_response(
                {"code": -1102, "msg": "Mandatory parameter"},
                status_code=400,
            )
            mock_get_client.return_value = mock_http_client

            response = await dispatcher.dispatch(_withdraw_history_descriptor(), client_config)

            assert response.status_code == 400
            assert not response.ok

    @pytest.mark.asyncio
    async def test_cancel_in_flight(
        self,
        dispatcher: Dispatcher,
        client_config: ClientConfig,
    ) -> None:
        """진행 중 요청 취소 시 CancelledError 전파"""
        started = asyncio.Event()

        async def slow_request(*args, **kwargs):
            started.set()
            await asyncio.sleep(10)

        with patch.object(dispatcher, "_get_client") as mock_get_client:
            mock_http_client = AsyncMock()
            mock_http_client.request.side_effect = slow_request
            mock_get_client.return_value = mock_http_client

            task = asyncio.create_task(
                dispatcher.dispatch(_withdraw_history_descriptor(), client_config)
            )
            await started.wait()
            task.cancel()

            with pytest.raises(asyncio.CancelledError):
                await task

            assert task.cancelled()

    @pytest.mark.asyncio
    async def test_concurrent_requests_not_blocked(
        self,
        dispatcher: Dispatcher,
        client_config: ClientConfig,
        make_http_response,
    ) -> None:
        """느린 요청이 다른 요청을 막지 않음"""
        release = asyncio.Event()

        async def request(method, url, **kwargs):
            if "slow" in url:
                await release.wait()
            return make_http_response(b"[]")

        with patch.object(dispatcher, "_get_client") as mock_get_client:
            mock_http_client = AsyncMock()
            mock_http_client.request.side_effect = request
            mock_get_client.return_value = mock_http_client

            slow = asyncio.create_task(
                dispatcher.dispatch(RequestDescriptor.public(HttpMethod.GET, "/slow"), client_config)
            )
            fast = await dispatcher.dispatch(
                RequestDescriptor.public(HttpMethod.GET, "/fast"), client_config
            )

            assert fast.body == b"[]"
            assert not slow.done()

            release.set()
            assert (await slow).body == b"[]"


class TestDispatcherRateLimit:
    """Rate Limit 추적 테스트"""

    @pytest.mark.asyncio
    async def test_updates_tracker_from_headers(
        self,
        dispatcher: Dispatcher,
        client_config: ClientConfig,
        make_http_response,
    ) -> None:
        with patch.object(dispatcher, "_get_client") as mock_get_client:
            mock_http_client = AsyncMock()
            mock_http_client.request.return_value = make_http_response(
                b"[]",
                headers={"X-SAPI-USED-IP-WEIGHT-1M": "600", "X-MBX-USED-WEIGHT-1m": "20"},
            )
            mock_get_client.return_value = mock_http_client

            await dispatcher.dispatch(_withdraw_history_descriptor(), client_config)

            assert dispatcher.rate_tracker.sapi_ip_weight_1m == 600
            assert dispatcher.rate_tracker.used_weight_1m == 20

    @pytest.mark.asyncio
    async def test_threshold_blocks_request(
        self,
        dispatcher: Dispatcher,
        client_config: ClientConfig,
    ) -> None:
        """임계값 초과 시 전송 전 차단"""
        dispatcher.rate_tracker.sapi_ip_weight_1m = 6000

        with patch.object(dispatcher, "_get_client") as mock_get_client:
            mock_http_client = AsyncMock()
            mock_get_client.return_value = mock_http_client

            with pytest.raises(RateLimitError):
                await dispatcher.dispatch(_withdraw_history_descriptor(), client_config)

            mock_http_client.request.assert_not_called()

    @pytest.mark.asyncio
    async def test_request_resumes_after_window(
        self,
        dispatcher: Dispatcher,
        client_config: ClientConfig,
        make_http_response,
    ) -> None:
        """1분 구간이 지나면 다시 전송"""
        with patch.object(dispatcher, "_get_client") as mock_get_client:
            mock_http_client = AsyncMock()
            mock_http_client.request.return_value = make_http_response(
                b"[]",
                headers={"X-SAPI-USED-IP-WEIGHT-1m": "5950"},
            )
            mock_get_client.return_value = mock_http_client

            await dispatcher.dispatch(_withdraw_history_descriptor(), client_config)

            with pytest.raises(RateLimitError):
                await dispatcher.dispatch(_withdraw_history_descriptor(), client_config)
            assert mock_http_client.request.call_count == 1

            dispatcher.rate_tracker.last_updated = (
                datetime.now(timezone.utc) - timedelta(minutes=10)
            )
            mock_http_client.request.return_value = make_http_response(
                b"[]",
                headers={"X-SAPI-USED-IP-WEIGHT-1m": "12"},
            )

            response = await dispatcher.dispatch(_withdraw_history_descriptor(), client_config)

            assert response.ok
            assert mock_http_client.request.call_count == 2
            assert dispatcher.rate_tracker.current_weight == 12

    @pytest.mark.asyncio
    async def test_non_numeric_weight_header(
        self,
        dispatcher: Dispatcher,
        client_config: ClientConfig,
        make_http_response,
    ) -> None:
        """숫자가 아닌 weight 헤더는 무시하고 응답 반환"""
        with patch.object(dispatcher, "_get_client") as mock_get_client:
            mock_http_client = AsyncMock()
            mock_http_client.request.return_value = make_http_response(
                b"[]",
                headers={"X-MBX-USED-WEIGHT-1m": "n/a", "Retry-After": "soon"},
            )
            mock_get_client.return_value = mock_http_client

            response = await dispatcher.dispatch(_withdraw_history_descriptor(), client_config)

            assert response.status_code == 200
            assert response.body == b"[]"
            assert dispatcher.rate_tracker.used_weight_1m == 0


class TestDispatcherTimeSync:
    """서버 시간 동기화 테스트"""

    @pytest.mark.asyncio
    async def test_sync_time_sets_offset(
        self,
        client_config: ClientConfig,
        make_http_response,
    ) -> None:
        dispatcher = Dispatcher()

        with patch.object(dispatcher, "_get_client") as mock_get_client, \
                patch("capital.dispatcher.now_ms", return_value=1000):
            mock_http_client = AsyncMock()
            mock_http_client.request.return_value = make_http_response({"serverTime": 6000})
            mock_get_client.return_value = mock_http_client

            offset = await dispatcher.sync_time(client_config)

            assert offset == 5000
            assert dispatcher.time_offset == 5000

    @pytest.mark.asyncio
    async def test_signed_request_syncs_once(
        self,
        client_config: ClientConfig,
        make_http_response,
    ) -> None:
        """첫 SIGNED 요청 전 1회 동기화, timestamp에 오프셋 반영"""
        dispatcher = Dispatcher()

        with patch.object(dispatcher, "_get_client") as mock_get_client, \
                patch("capital.dispatcher.now_ms", return_value=1000):
            mock_http_client = AsyncMock()
            mock_http_client.request.side_effect = [
                make_http_response({"serverTime": 6000}),
                make_http_response(b"[]"),
                make_http_response(b"[]"),
            ]
            mock_get_client.return_value = mock_http_client

            await dispatcher.dispatch(_withdraw_history_descriptor(), client_config)
            await dispatcher.dispatch(_withdraw_history_descriptor(), client_config)

            urls = [call.args[1] for call in mock_http_client.request.call_args_list]
            assert urls[0] == "https://api.binance.com/api/v3/time"
            assert "&timestamp=6000&" in urls[1]
            assert len(urls) == 3
