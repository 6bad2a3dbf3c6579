"""
Capital 클라이언트 테스트 픽스처

공통 설정, HTTP 응답 Mock, Binance API 응답 샘플 제공.
"""

import json
from typing import Any, Callable
from unittest.mock import MagicMock

import pytest

from core.config.loader import ClientConfig
from capital.dispatcher import Dispatcher


# -------------------------------------------------------------------------
# 설정 / 전송기
# -------------------------------------------------------------------------

@pytest.fixture
def client_config() -> ClientConfig:
    """테스트용 클라이언트 설정"""
    return ClientConfig(
        base_url="https://api.binance.com",
        api_key="test_api_key",
        api_secret="test_secret_key",
        recv_window=5000,
        timeout=10.0,
    )


@pytest.fixture
def dispatcher() -> Dispatcher:
    """시간 동기화를 건너뛴 전송기"""
    d = Dispatcher()
    d._time_synced = True
    return d


@pytest.fixture
def make_http_response() -> Callable[..., MagicMock]:
    """httpx.Response 대용 Mock 생성기

    body가 bytes/str이 아니면 JSON으로 직렬화.
    """

    def _make(
        body: Any = b"{}",
        status_code: int = 200,
        headers: dict[str, str] | None = None,
    ) -> MagicMock:
        if isinstance(body, str):
            content = body.encode("utf-8")
        elif isinstance(body, bytes):
            content = body
        else:
            content = json.dumps(body).encode("utf-8")

        response = MagicMock()
        response.status_code = status_code
        response.content = content
        response.headers = headers or {}
        return response

    return _make


# -------------------------------------------------------------------------
# Binance API 응답 샘플
# -------------------------------------------------------------------------

@pytest.fixture
def withdraw_history_body() -> bytes:
    """출금 내역 응답 샘플 (2건, 원문 그대로)"""
    return b"""
    [
        {
            "id":"7213fea8e94b4a5593d507237e5a555b",
            "withdrawOrderID": "",
            "amount": "0.99",
            "transactionFee": "0.01",
            "address": "0x6915f16f8791d0a1cc2bf47c13a6b2a92000504b",
            "coin": "USDT",
            "txId": "0xdf33b22bdb2b28b1f75ccd201a4a4m6e7g83jy5fc5d5a9d1340961598cfcb0a1",
            "applyTime": "2019-10-12 11:12:02",
            "network": "ETH",
            "status": 4
        },
        {
            "id":"7213fea8e94b4a5534ggsd237e5a555b",
            "withdrawOrderID": "withdrawtest",
            "amount": "999.9999",
            "transactionFee": "0.0001",
            "address": "463tWEBn5XZJSxLU34r6g7h8jtxuNcDbjLSjkn3XAXHCbLrTTErJrBWYgHJQyrCwkNgYvyV3z8zctJLPCZy24jvb3NiTcTJ",
            "addressTag": "342341222",
            "txId": "b3c6219639c8ae3f9cf010cdc24fw7f7yt8j1e063f9b4bd1a05cb44c4b6e2509",
            "coin": "XMR",
            "applyTime": "2019-10-12 11:12:02",
            "status": 4
        }
    ]
    """


@pytest.fixture
def deposit_history_response() -> list[dict[str, Any]]:
    """입금 내역 응답 샘플"""
    return [
        {
            "id": "769800519366885376",
            "amount": "0.001",
            "coin": "BNB",
            "network": "BNB",
            "status": 1,
            "address": "bnb136ns6lfw4zs5hg4n85vdthaad7hq5m4gtkgf23",
            "addressTag": "101764890",
            "txId": "98A3EA560C6B3336D348B6C83F0F95ECE4F1F5919E94BD006E5BF3BF264FACFC",
            "insertTime": 1661493146000,
            "transferType": 0,
            "confirmTimes": "1/1",
        },
        {
            "id": "769754833590042625",
            "amount": "0.50000000",
            "coin": "IOTA",
            "network": "IOTA",
            "status": 0,
            "address": "SIZ9VLMHWATXKV99LH99CIGFJFUMLEHGWVZVNNZXRJJVWBPHYWPPBOSDORZ9EQSHCZAMPVAPGFYQAUUV9DROOXJLNW",
            "addressTag": "",
            "txId": "ESBFVQUTPIWQNJSPXFNHNYHSQNTGKRVKPRABQWTAXCDWOAKDKYWPTVG9BGXNVNKTLEJGESAVXIKIZ9999",
            "insertTime": 1599620082000,
            "transferType": 0,
            "confirmTimes": "1/1",
        },
    ]


@pytest.fixture
def deposit_address_response() -> dict[str, str]:
    """입금 주소 응답 샘플"""
    return {
        "coin": "BTC",
        "address": "1A1zP1eP5QGefi2DMPTfTL5SLmv7DivfNa",
        "tag": "",
        "url": "",
    }
