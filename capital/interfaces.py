"""
클라이언트 인터페이스 정의

Protocol 기반으로 정의하여 의존성 주입 및 Mock 교체 가능.
"""

from typing import Protocol, runtime_checkable

from capital.models import Deposit, DepositAddress, Withdrawal, WithdrawResult
from capital.queries import (
    DepositAddressQuery,
    DepositHistoryQuery,
    WithdrawHistoryQuery,
    WithdrawRequest,
)


@runtime_checkable
class ICapitalClient(Protocol):
    """입출금 API 클라이언트 인터페이스

    금액은 반드시 Decimal 타입 사용.
    """

    async def list_deposits(self, query: DepositHistoryQuery | None = None) -> list[Deposit]:
        """입금 내역 조회"""
        ...

    async def get_deposit_address(self, query: DepositAddressQuery) -> DepositAddress:
        """입금 주소 조회"""
        ...

    async def withdraw(self, request: WithdrawRequest) -> WithdrawResult:
        """출금 신청"""
        ...

    async def list_withdrawals(self, query: WithdrawHistoryQuery | None = None) -> list[Withdrawal]:
        """출금 내역 조회"""
        ...

    async def close(self) -> None:
        """리소스 정리"""
        ...
