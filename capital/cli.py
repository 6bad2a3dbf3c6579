"""
입출금 CLI

실행 방법:
    python -m capital deposits --coin USDT
    python -m capital address --coin BTC --network BTC
    python -m capital withdrawals --coin USDT --status 6
    python -m capital withdraw --coin USDT --network TRX --address T... --amount 10 --yes
"""

import argparse
import asyncio
import logging
from decimal import Decimal, InvalidOperation
from pathlib import Path

from core.config.loader import SecretsLoadError, get_client_config, load_secrets
from core.logging import setup_logging
from core.utils.timezone import format_kst
from capital.client import CapitalClient
from capital.errors import CapitalError
from capital.queries import (
    DepositAddressQuery,
    DepositHistoryQuery,
    WithdrawHistoryQuery,
    WithdrawRequest,
)

logger = logging.getLogger("capital.cli")


def _decimal_arg(value: str) -> Decimal:
    """수량 인자 (10진 문자열)"""
    try:
        return Decimal(value)
    except InvalidOperation:
        raise argparse.ArgumentTypeError(f"잘못된 수량: {value!r}") from None


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="capital", description="Binance 입출금 조회/신청")
    parser.add_argument(
        "--secrets",
        type=Path,
        default=None,
        help="secrets.yaml 경로 (기본: config/secrets.yaml)",
    )
    parser.add_argument(
        "--log-dir",
        type=Path,
        default=None,
        help="로그 디렉토리 (기본: logs/)",
    )

    sub = parser.add_subparsers(dest="command", required=True)

    deposits = sub.add_parser("deposits", help="입금 내역 조회")
    deposits.add_argument("--coin")
    deposits.add_argument("--status", type=int)
    deposits.add_argument("--start-time", type=int, help="밀리초 (--end-time과 함께)")
    deposits.add_argument("--end-time", type=int, help="밀리초 (--start-time과 함께)")
    deposits.add_argument("--limit", type=int)

    address = sub.add_parser("address", help="입금 주소 조회")
    address.add_argument("--coin", required=True)
    address.add_argument("--network")

    withdrawals = sub.add_parser("withdrawals", help="출금 내역 조회")
    withdrawals.add_argument("--coin")
    withdrawals.add_argument("--status", type=int)
    withdrawals.add_argument("--start-time", type=int, help="밀리초 (--end-time과 함께)")
    withdrawals.add_argument("--end-time", type=int, help="밀리초 (--start-time과 함께)")
    withdrawals.add_argument("--limit", type=int)

    withdraw = sub.add_parser("withdraw", help="출금 신청")
    withdraw.add_argument("--coin", required=True)
    withdraw.add_argument("--address", required=True)
    withdraw.add_argument("--amount", required=True, type=_decimal_arg)
    withdraw.add_argument("--network")
    withdraw.add_argument("--tag", dest="address_tag")
    withdraw.add_argument("--order-id", dest="withdraw_order_id")
    withdraw.add_argument("--yes", action="store_true", help="확인 없이 실행")

    return parser


async def run(args: argparse.Namespace, client: CapitalClient) -> int:
    """명령 실행 (종료 코드 반환)"""
    if args.command == "deposits":
        deposits = await client.list_deposits(
            DepositHistoryQuery(
                coin=args.coin,
                status=args.status,
                start_time=args.start_time,
                end_time=args.end_time,
                limit=args.limit,
            )
        )
        for d in deposits:
            print(
                f"{format_kst(d.inserted_at)} | {d.coin:6} | {d.amount:>20} | "
                f"status={d.status} | {d.network} | {d.tx_id}"
            )
        print(f"총 {len(deposits)}건")

    elif args.command == "address":
        addr = await client.get_deposit_address(
            DepositAddressQuery(coin=args.coin, network=args.network)
        )
        print(f"coin:    {addr.coin}")
        print(f"address: {addr.address}")
        if addr.tag:
            print(f"tag:     {addr.tag}")

    elif args.command == "withdrawals":
        withdrawals = await client.list_withdrawals(
            WithdrawHistoryQuery(
                coin=args.coin,
                status=args.status,
                start_time=args.start_time,
                end_time=args.end_time,
                limit=args.limit,
            )
        )
        for w in withdrawals:
            print(
                f"{w.apply_time} | {w.coin:6} | {w.amount:>20} | fee={w.transaction_fee} | "
                f"status={w.status} | {w.network} | {w.id}"
            )
        print(f"총 {len(withdrawals)}건")

    elif args.command == "withdraw":
        request = WithdrawRequest(
            coin=args.coin,
            address=args.address,
            amount=args.amount,
            network=args.network,
            address_tag=args.address_tag,
            withdraw_order_id=args.withdraw_order_id,
        )
        if not args.yes:
            print(f"출금 예정: {request.amount} {request.coin} -> {request.address} ({request.network})")
            print("실행하려면 --yes 옵션을 추가하세요")
            return 1
        result = await client.withdraw(request)
        print(f"출금 신청 완료: id={result.id}")

    return 0


async def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging("capital", log_dir=args.log_dir)

    try:
        secrets = load_secrets(args.secrets)
    except (SecretsLoadError, ValueError) as e:
        logger.error(f"설정 로드 실패: {e}")
        return 2

    async with CapitalClient(get_client_config(secrets)) as client:
        try:
            return await run(args, client)
        except CapitalError as e:
            logger.error(f"요청 실패: {e}")
            return 1


def entrypoint() -> int:
    """콘솔 스크립트 진입점"""
    return asyncio.run(main())
