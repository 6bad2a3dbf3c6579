"""
Capital API 응답 -> 도메인 모델 변환

모든 금액/수수료는 Decimal 타입 사용.
JSON의 문자열/Decimal 값에서 직접 변환하며 float는 거부.
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Any

from core.types import DepositStatus, WithdrawStatus
from core.utils.timezone import parse_api_datetime, utc_from_timestamp_ms
from capital.decoder import unwrap_list


def to_decimal(value: Any) -> Decimal:
    """금액 값 -> Decimal

    Args:
        value: 문자열, 정수 또는 Decimal (decoder가 소수를 Decimal로 파싱)

    Raises:
        TypeError: float/bool 등 정밀도 보장이 안 되는 타입
        decimal.InvalidOperation: 숫자가 아닌 문자열
    """
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool) or not isinstance(value, (str, int)):
        raise TypeError(f"amount must be str, int or Decimal, got {type(value).__name__}")
    return Decimal(value)


# -------------------------------------------------------------------------
# 모델
# -------------------------------------------------------------------------


@dataclass(frozen=True)
class Deposit:
    """입금 내역

    Attributes:
        amount: 입금 금액
        coin: 코인 코드
        address: 입금 주소
        address_tag: 메모/태그
        tx_id: 트랜잭션 ID
        insert_time: 입금 시간 (밀리초)
        status: 입금 상태 (DepositStatus 참조)
        network: 네트워크
        id: 입금 ID
        transfer_type: 0 = 외부 입금, 1 = 내부 이체
        confirm_times: 컨펌 진행 (예: "12/12")
    """

    amount: Decimal
    coin: str
    address: str
    tx_id: str
    insert_time: int
    status: int
    address_tag: str = ""
    network: str = ""
    id: str = ""
    transfer_type: int = 0
    confirm_times: str = ""

    @property
    def inserted_at(self) -> datetime:
        """입금 시간 (UTC)"""
        return utc_from_timestamp_ms(self.insert_time)

    @property
    def is_success(self) -> bool:
        return self.status == DepositStatus.SUCCESS

    @property
    def is_pending(self) -> bool:
        return self.status in (
            DepositStatus.PENDING,
            DepositStatus.CREDITED_CANNOT_WITHDRAW,
            DepositStatus.WAITING_USER_CONFIRM,
        )


@dataclass(frozen=True)
class DepositAddress:
    """입금 주소"""

    coin: str
    address: str
    tag: str = ""
    url: str = ""


@dataclass(frozen=True)
class Withdrawal:
    """출금 내역

    Attributes:
        id: 출금 ID
        withdraw_order_id: 클라이언트 지정 출금 ID
        amount: 출금 금액
        transaction_fee: 수수료
        address: 출금 주소
        address_tag: 메모/태그
        coin: 코인 코드
        tx_id: 트랜잭션 ID
        apply_time: 신청 시간 (UTC, 수신한 문자열 그대로)
        network: 네트워크
        status: 출금 상태 (WithdrawStatus 참조)
    """

    id: str
    amount: Decimal
    transaction_fee: Decimal
    address: str
    coin: str
    apply_time: str
    status: int
    withdraw_order_id: str = ""
    address_tag: str = ""
    tx_id: str = ""
    network: str = ""
    transfer_type: int = 0
    info: str = ""
    complete_time: str = ""

    @property
    def applied_at(self) -> datetime:
        """신청 시간 (UTC datetime)"""
        return parse_api_datetime(self.apply_time)

    @property
    def is_completed(self) -> bool:
        return self.status == WithdrawStatus.COMPLETED

    @property
    def is_final(self) -> bool:
        """더 이상 상태가 바뀌지 않는지 여부"""
        return self.status in (
            WithdrawStatus.CANCELLED,
            WithdrawStatus.REJECTED,
            WithdrawStatus.FAILURE,
            WithdrawStatus.COMPLETED,
        )


@dataclass(frozen=True)
class WithdrawResult:
    """출금 신청 결과"""

    id: str


# -------------------------------------------------------------------------
# 파서
# -------------------------------------------------------------------------


def parse_server_time(data: dict[str, Any]) -> int:
    """GET /api/v3/time 응답 -> 서버 시간 (밀리초)

    {"serverTime": 1499827319559}
    """
    return int(data["serverTime"])


def parse_ping(data: dict[str, Any]) -> None:
    """GET /api/v3/ping 응답 ({}) 확인"""
    if not isinstance(data, dict):
        raise TypeError("expected an empty JSON object")


def parse_deposit(data: dict[str, Any]) -> Deposit:
    """입금 내역 항목 -> Deposit 모델

    GET /sapi/v1/capital/deposit/hisrec 응답 항목 예시:
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
        "confirmTimes": "1/1"
    }

    구버전 응답의 "asset" 키도 허용.
    """
    coin = data["coin"] if "coin" in data else data["asset"]

    return Deposit(
        amount=to_decimal(data["amount"]),
        coin=coin,
        address=data["address"],
        tx_id=data.get("txId") or "",
        insert_time=int(data["insertTime"]),
        status=int(data["status"]),
        address_tag=data.get("addressTag") or "",
        network=data.get("network") or "",
        id=str(data.get("id") or ""),
        transfer_type=int(data.get("transferType") or 0),
        confirm_times=data.get("confirmTimes") or "",
    )


def parse_deposits(data: Any) -> list[Deposit]:
    """입금 내역 목록 (배열 또는 {"success": true, "depositList": [...]})"""
    return [parse_deposit(item) for item in unwrap_list(data, "depositList")]


def parse_deposit_address(data: dict[str, Any]) -> DepositAddress:
    """입금 주소 응답 -> DepositAddress 모델

    {"coin": "BTC", "address": "1HPn8Rx2y6nNSfagQBKy27GB99Vbzg89wv", "tag": "", "url": "..."}
    """
    return DepositAddress(
        coin=data["coin"],
        address=data["address"],
        tag=data.get("tag") or "",
        url=data.get("url") or "",
    )


def parse_withdrawal(data: dict[str, Any]) -> Withdrawal:
    """출금 내역 항목 -> Withdrawal 모델

    GET /sapi/v1/capital/withdraw/history 응답 항목 예시:
    {
        "id": "b6ae22b3aa844210a7041aee7589627c",
        "amount": "8.91000000",
        "transactionFee": "0.004",
        "coin": "USDT",
        "status": 6,
        "address": "0x94df8b352de7f46f64b01d3666bf6e936e44ce60",
        "txId": "0xb5ef8c13b968a406cc62a93a8bd80f9e9a906ef1b3fcf20a2e48573c17659268",
        "applyTime": "2019-10-12 11:12:02",
        "network": "ETH",
        "transferType": 0,
        "withdrawOrderId": "WITHDRAWtest123",
        "info": "The address is not valid. Please confirm with the recipient",
        "completeTime": "2023-03-23 16:52:41"
    }
    """
    # 일부 응답은 withdrawOrderID 표기 사용
    withdraw_order_id = data.get("withdrawOrderId") or data.get("withdrawOrderID") or ""

    return Withdrawal(
        id=str(data["id"]),
        amount=to_decimal(data["amount"]),
        transaction_fee=to_decimal(data.get("transactionFee") or "0"),
        address=data["address"],
        coin=data["coin"],
        apply_time=data["applyTime"],
        status=int(data["status"]),
        withdraw_order_id=withdraw_order_id,
        address_tag=data.get("addressTag") or "",
        tx_id=data.get("txId") or "",
        network=data.get("network") or "",
        transfer_type=int(data.get("transferType") or 0),
        info=data.get("info") or "",
        complete_time=data.get("completeTime") or "",
    )


def parse_withdrawals(data: Any) -> list[Withdrawal]:
    """출금 내역 목록 (배열 또는 {"success": true, "withdrawList": [...]})"""
    return [parse_withdrawal(item) for item in unwrap_list(data, "withdrawList")]


def parse_withdraw_result(data: dict[str, Any]) -> WithdrawResult:
    """출금 신청 응답 -> WithdrawResult

    {"id": "7213fea8e94b4a5593d507237e5a555b"}
    """
    return WithdrawResult(id=str(data["id"]))
