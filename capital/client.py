"""
Binance Capital(입출금) REST API 클라이언트

입금 내역/입금 주소/출금 신청/출금 내역 조회.
ICapitalClient Protocol 준수. 모든 금액은 Decimal.
"""

import logging
from typing import Any, Callable, TypeVar

from core.config.loader import ClientConfig
from core.constants import CapitalPaths
from core.types import HttpMethod
from capital.decoder import decode
from capital.dispatcher import Dispatcher
from capital.errors import ApiError
from capital.models import (
    Deposit,
    DepositAddress,
    Withdrawal,
    WithdrawResult,
    parse_deposit_address,
    parse_deposits,
    parse_ping,
    parse_server_time,
    parse_withdraw_result,
    parse_withdrawals,
)
from capital.queries import (
    DepositAddressQuery,
    DepositHistoryQuery,
    WithdrawHistoryQuery,
    WithdrawRequest,
)
from capital.request import RequestDescriptor

logger = logging.getLogger(__name__)

T = TypeVar("T")


class CapitalClient:
    """Binance Capital REST API 클라이언트

    설정(ClientConfig)은 한 번 만들어 공유. 동시 호출 가능.

    Args:
        config: 클라이언트 설정
        dispatcher: 전송기 (None이면 새로 생성)

    사용 예:
        async with CapitalClient(config) as client:
            deposits = await client.list_deposits(DepositHistoryQuery(coin="USDT"))
    """

    def __init__(self, config: ClientConfig, dispatcher: Dispatcher | None = None):
        self.config = config
        self.dispatcher = dispatcher or Dispatcher()

    async def _call(self, descriptor: RequestDescriptor, parser: Callable[[Any], T]) -> T:
        response = await self.dispatcher.dispatch(descriptor, self.config)
        return decode(response, parser)

    async def close(self) -> None:
        """HTTP 클라이언트 종료"""
        await self.dispatcher.close()

    # -------------------------------------------------------------------------
    # 공개 API
    # -------------------------------------------------------------------------

    async def ping(self) -> None:
        """연결 확인"""
        await self._call(
            RequestDescriptor.public(HttpMethod.GET, CapitalPaths.PING),
            parse_ping,
        )

    async def get_server_time(self) -> int:
        """서버 시간 조회 (밀리초)"""
        return await self._call(
            RequestDescriptor.public(HttpMethod.GET, CapitalPaths.SERVER_TIME),
            parse_server_time,
        )

    async def sync_time(self) -> int:
        """서버 시간 동기화 (오프셋 반환)"""
        return await self.dispatcher.sync_time(self.config)

    # -------------------------------------------------------------------------
    # 입금
    # -------------------------------------------------------------------------

    async def list_deposits(self, query: DepositHistoryQuery | None = None) -> list[Deposit]:
        """입금 내역 조회

        Args:
            query: 조회 조건 (None이면 조건 없음)

        Returns:
            입금 내역 리스트
        """
        query = query or DepositHistoryQuery()
        deposits = await self._call(
            RequestDescriptor.signed(
                HttpMethod.GET,
                CapitalPaths.DEPOSIT_HISTORY,
                query.to_params(),
            ),
            parse_deposits,
        )

        logger.debug(
            "입금 내역 조회 완료",
            extra={"coin": query.coin, "count": len(deposits)},
        )
        return deposits

    async def get_deposit_address(self, query: DepositAddressQuery) -> DepositAddress:
        """입금 주소 조회"""
        return await self._call(
            RequestDescriptor.signed(
                HttpMethod.GET,
                CapitalPaths.DEPOSIT_ADDRESS,
                query.to_params(),
            ),
            parse_deposit_address,
        )

    # -------------------------------------------------------------------------
    # 출금
    # -------------------------------------------------------------------------

    async def withdraw(self, request: WithdrawRequest) -> WithdrawResult:
        """코인 출금 신청

        Args:
            request: 출금 요청

        Returns:
            출금 결과 (출금 ID)
        """
        try:
            result = await self._call(
                RequestDescriptor.signed(
                    HttpMethod.POST,
                    CapitalPaths.WITHDRAW_APPLY,
                    request.to_params(),
                ),
                parse_withdraw_result,
            )
        except ApiError as e:
            logger.error(
                "코인 출금 요청 실패",
                extra={
                    "error_code": e.code,
                    "error_message": e.message,
                    "coin": request.coin,
                    "network": request.network,
                },
            )
            raise

        logger.info(
            "코인 출금 요청 완료",
            extra={
                "coin": request.coin,
                "network": request.network,
                "address": request.address,
                "amount": str(request.amount),
                "withdraw_id": result.id,
            },
        )
        return result

    async def list_withdrawals(self, query: WithdrawHistoryQuery | None = None) -> list[Withdrawal]:
        """출금 내역 조회

        Args:
            query: 조회 조건 (None이면 조건 없음)

        Returns:
            출금 내역 리스트
        """
        query = query or WithdrawHistoryQuery()
        withdrawals = await self._call(
            RequestDescriptor.signed(
                HttpMethod.GET,
                CapitalPaths.WITHDRAW_HISTORY,
                query.to_params(),
            ),
            parse_withdrawals,
        )

        logger.debug(
            "출금 내역 조회 완료",
            extra={"coin": query.coin, "count": len(withdrawals)},
        )
        return withdrawals

    # -------------------------------------------------------------------------
    # 컨텍스트 매니저
    # -------------------------------------------------------------------------

    async def __aenter__(self) -> "CapitalClient":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()
