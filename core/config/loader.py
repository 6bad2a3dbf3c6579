"""
설정 로더

secrets.yaml 로드 및 클라이언트 설정 생성
"""

from dataclasses import dataclass, field
from pathlib import Path

import yaml

from core.constants import BinanceEndpoints, Defaults, Paths
from core.types import TradingMode


@dataclass(frozen=True)
class Secrets:
    """보안 설정 (secrets.yaml에서 로드)

    불변 데이터 구조로 설정 변경 방지
    """

    mode: TradingMode
    api_key: str
    api_secret: str = field(repr=False)
    recv_window: int | None = Defaults.RECV_WINDOW_MS
    timeout: float = Defaults.TIMEOUT_SEC


@dataclass(frozen=True)
class ClientConfig:
    """클라이언트 연결 설정

    한 번 생성하여 모든 요청에 공유. API 시크릿은 repr에서 제외.

    Attributes:
        base_url: REST API 베이스 URL
        api_key: API 키
        api_secret: API 시크릿 (HMAC 키)
        recv_window: 요청 유효 시간 (밀리초, None이면 전송 안 함)
        timeout: 요청 타임아웃 (초)
    """

    base_url: str
    api_key: str
    api_secret: str = field(repr=False)
    recv_window: int | None = Defaults.RECV_WINDOW_MS
    timeout: float = Defaults.TIMEOUT_SEC

    def __post_init__(self) -> None:
        if self.recv_window is not None and self.recv_window <= 0:
            raise ValueError("recv_window must be positive")
        if self.timeout <= 0:
            raise ValueError("timeout must be positive")


class SecretsLoadError(Exception):
    """Secrets 로드 실패 예외"""

    pass


def load_secrets(path: Path | None = None) -> Secrets:
    """secrets.yaml 파일 로드

    형식:
        mode: testnet
        production:
          api_key: "..."
          api_secret: "..."
        testnet:
          api_key: "..."
          api_secret: "..."
        client:              # 선택
          recv_window: 5000
          timeout: 30

    Args:
        path: secrets.yaml 경로 (None이면 기본 경로 사용)

    Returns:
        Secrets 인스턴스

    Raises:
        SecretsLoadError: 파일이 없거나 형식이 잘못된 경우
        ValueError: 유효하지 않은 mode인 경우
    """
    if path is None:
        path = Paths.SECRETS_FILE

    if not path.exists():
        raise SecretsLoadError(f"secrets.yaml 파일을 찾을 수 없습니다: {path}")

    try:
        content = path.read_text(encoding="utf-8")
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise SecretsLoadError(f"secrets.yaml 파싱 실패: {e}") from e

    if data is None:
        raise SecretsLoadError("secrets.yaml이 비어 있습니다")

    mode_str = data.get("mode")
    if mode_str is None:
        raise SecretsLoadError("secrets.yaml에 'mode' 필드가 없습니다")

    try:
        mode = TradingMode(mode_str)
    except ValueError as e:
        valid_modes = [m.value for m in TradingMode]
        raise ValueError(
            f"유효하지 않은 mode입니다: '{mode_str}'. "
            f"유효한 값: {valid_modes}"
        ) from e

    # 해당 모드의 API 키 로드
    mode_config = data.get(mode.value)
    if mode_config is None:
        raise SecretsLoadError(
            f"secrets.yaml에 '{mode.value}' 설정이 없습니다"
        )

    api_key = mode_config.get("api_key")
    api_secret = mode_config.get("api_secret")

    if not api_key:
        raise SecretsLoadError(
            f"secrets.yaml의 {mode.value} 섹션에 'api_key'가 없습니다"
        )
    if not api_secret:
        raise SecretsLoadError(
            f"secrets.yaml의 {mode.value} 섹션에 'api_secret'가 없습니다"
        )

    # 클라이언트 옵션 (선택)
    client_config = data.get("client") or {}
    recv_window = client_config.get("recv_window", Defaults.RECV_WINDOW_MS)
    timeout = client_config.get("timeout", Defaults.TIMEOUT_SEC)

    try:
        recv_window = int(recv_window) if recv_window is not None else None
        timeout = float(timeout)
    except (TypeError, ValueError) as e:
        raise SecretsLoadError(f"secrets.yaml의 client 섹션 형식 오류: {e}") from e

    return Secrets(
        mode=mode,
        api_key=str(api_key),
        api_secret=str(api_secret),
        recv_window=recv_window,
        timeout=timeout,
    )


def get_client_config(secrets: Secrets) -> ClientConfig:
    """모드에 따른 클라이언트 설정 반환

    Args:
        secrets: Secrets 인스턴스

    Returns:
        ClientConfig 인스턴스 (Production 또는 Testnet)
    """
    if secrets.mode == TradingMode.PRODUCTION:
        base_url = BinanceEndpoints.PROD_REST_URL
    else:
        base_url = BinanceEndpoints.TEST_REST_URL

    return ClientConfig(
        base_url=base_url,
        api_key=secrets.api_key,
        api_secret=secrets.api_secret,
        recv_window=secrets.recv_window,
        timeout=secrets.timeout,
    )
