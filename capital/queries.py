"""
엔드포인트 요청 값

선택 필드는 None이면 전송하지 않음 (status=0 과 미설정 구분).
검증 실패는 생성 시점에 ConfigurationError (네트워크 요청 전).
"""

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation

from capital.errors import ConfigurationError
from capital.params import ParameterSet

# startTime ~ endTime 최대 구간 (90일)
MAX_TIME_RANGE_MS = 90 * 24 * 60 * 60 * 1000

MAX_HISTORY_LIMIT = 1000


def _validate_time_range(start_time: int | None, end_time: int | None) -> None:
    """startTime/endTime은 함께 지정해야 하며 구간은 0~90일"""
    if (start_time is None) != (end_time is None):
        raise ConfigurationError("startTime and endTime must be set together")
    if start_time is None or end_time is None:
        return
    if end_time < start_time:
        raise ConfigurationError("endTime must not be earlier than startTime")
    if end_time - start_time > MAX_TIME_RANGE_MS:
        raise ConfigurationError("startTime ~ endTime range must be within 90 days")


def _validate_paging(offset: int | None, limit: int | None) -> None:
    if offset is not None and offset < 0:
        raise ConfigurationError("offset must not be negative")
    if limit is not None and not 1 <= limit <= MAX_HISTORY_LIMIT:
        raise ConfigurationError(f"limit must be between 1 and {MAX_HISTORY_LIMIT}")


def _normalize_coin(coin: str | None) -> str | None:
    return coin.upper() if coin else coin


@dataclass(frozen=True)
class DepositHistoryQuery:
    """입금 내역 조회 조건

    Attributes:
        coin: 코인 코드
        status: 상태 필터 (0: pending, 6: credited, 1: success)
        start_time: 시작 시간 (밀리초, end_time과 함께)
        end_time: 종료 시간 (밀리초, start_time과 함께)
        offset: 페이지 오프셋
        limit: 조회 개수 (최대 1000)
        tx_id: 트랜잭션 ID
    """

    coin: str | None = None
    status: int | None = None
    start_time: int | None = None
    end_time: int | None = None
    offset: int | None = None
    limit: int | None = None
    tx_id: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "coin", _normalize_coin(self.coin))
        _validate_time_range(self.start_time, self.end_time)
        _validate_paging(self.offset, self.limit)

    def to_params(self) -> ParameterSet:
        """ParameterSet으로 변환 (API 요청용)"""
        params = ParameterSet()
        params.set_if_present("coin", self.coin)
        params.set_if_present("status", self.status)
        params.set_if_present("startTime", self.start_time)
        params.set_if_present("endTime", self.end_time)
        params.set_if_present("offset", self.offset)
        params.set_if_present("limit", self.limit)
        params.set_if_present("txId", self.tx_id)
        return params


@dataclass(frozen=True)
class DepositAddressQuery:
    """입금 주소 조회 조건 (coin 필수)"""

    coin: str
    network: str | None = None

    def __post_init__(self) -> None:
        if not self.coin:
            raise ConfigurationError("coin is required")
        object.__setattr__(self, "coin", _normalize_coin(self.coin))

    def to_params(self) -> ParameterSet:
        params = ParameterSet()
        params.set("coin", self.coin)
        params.set_if_present("network", self.network)
        return params


@dataclass(frozen=True)
class WithdrawRequest:
    """출금 요청

    address_tag 필요 여부 등 코인별 규칙은 거래소 정책이므로 검증하지 않음.

    Attributes:
        coin: 코인 코드
        address: 출금 주소
        amount: 출금 금액 (Decimal/str/int, float 불가)
        withdraw_order_id: 클라이언트 지정 출금 ID
        network: 네트워크 (예: ETH, TRX, BSC)
        address_tag: 메모/태그
        transaction_fee_flag: 내부 이체 시 수수료를 받는 쪽에서 부담할지 여부
        name: 주소록 이름
        wallet_type: 0 = spot wallet, 1 = funding wallet
    """

    coin: str
    address: str
    amount: Decimal
    withdraw_order_id: str | None = None
    network: str | None = None
    address_tag: str | None = None
    transaction_fee_flag: bool | None = None
    name: str | None = None
    wallet_type: int | None = None

    def __post_init__(self) -> None:
        if not self.coin:
            raise ConfigurationError("coin is required")
        if not self.address:
            raise ConfigurationError("address is required")

        # 금액은 Decimal로 정규화 (float 경유 금지)
        amount = self.amount
        if isinstance(amount, (float, bool)) or not isinstance(amount, (Decimal, str, int)):
            raise ConfigurationError(
                f"amount must be Decimal, str or int, got {type(amount).__name__}"
            )
        try:
            amount = Decimal(amount)
        except InvalidOperation as e:
            raise ConfigurationError(f"invalid amount: {self.amount!r}") from e
        if not amount.is_finite() or amount <= Decimal("0"):
            raise ConfigurationError("amount must be positive")

        object.__setattr__(self, "amount", amount)
        object.__setattr__(self, "coin", _normalize_coin(self.coin))

        if self.wallet_type is not None and self.wallet_type not in (0, 1):
            raise ConfigurationError("wallet_type must be 0 (spot) or 1 (funding)")

    def to_params(self) -> ParameterSet:
        params = ParameterSet()
        params.set("coin", self.coin)
        params.set_if_present("withdrawOrderId", self.withdraw_order_id)
        params.set_if_present("network", self.network)
        params.set("address", self.address)
        params.set_if_present("addressTag", self.address_tag)
        params.set("amount", self.amount)
        params.set_if_present("transactionFeeFlag", self.transaction_fee_flag)
        params.set_if_present("name", self.name)
        params.set_if_present("walletType", self.wallet_type)
        return params


@dataclass(frozen=True)
class WithdrawHistoryQuery:
    """출금 내역 조회 조건

    Attributes:
        coin: 코인 코드
        withdraw_order_id: 클라이언트 지정 출금 ID
        status: 상태 필터 (0: email sent, 1: cancelled, 2: awaiting,
                3: rejected, 4: processing, 5: failure, 6: completed)
        start_time: 시작 시간 (밀리초, end_time과 함께)
        end_time: 종료 시간 (밀리초, start_time과 함께)
        offset: 페이지 오프셋
        limit: 조회 개수 (최대 1000)
    """

    coin: str | None = None
    withdraw_order_id: str | None = None
    status: int | None = None
    start_time: int | None = None
    end_time: int | None = None
    offset: int | None = None
    limit: int | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "coin", _normalize_coin(self.coin))
        _validate_time_range(self.start_time, self.end_time)
        _validate_paging(self.offset, self.limit)

    def to_params(self) -> ParameterSet:
        params = ParameterSet()
        params.set_if_present("coin", self.coin)
        params.set_if_present("withdrawOrderId", self.withdraw_order_id)
        params.set_if_present("status", self.status)
        params.set_if_present("startTime", self.start_time)
        params.set_if_present("endTime", self.end_time)
        params.set_if_present("offset", self.offset)
        params.set_if_present("limit", self.limit)
        return params
