"""
하드코딩 상수 - 변경될 일이 거의 없는 고정값

중요: 경로는 반드시 pathlib.Path 사용 (Windows/Linux 크로스 플랫폼)
"""

from pathlib import Path


# 프로젝트 루트 (이 파일 기준 2단계 상위: core/constants.py → 프로젝트 루트)
PROJECT_ROOT: Path = Path(__file__).resolve().parent.parent


class BinanceEndpoints:
    """Binance Spot/SAPI 베이스 URL (고정값)

    공식 문서: https://developers.binance.com/docs/wallet/introduction
    """

    # Production (Spot / SAPI)
    PROD_REST_URL: str = "https://api.binance.com"

    # Testnet (Spot) - SAPI 입출금 기능은 지원하지 않음
    TEST_REST_URL: str = "https://testnet.binance.vision"


class CapitalPaths:
    """입출금 관련 API 경로"""

    PING: str = "/api/v3/ping"
    SERVER_TIME: str = "/api/v3/time"

    DEPOSIT_HISTORY: str = "/sapi/v1/capital/deposit/hisrec"
    DEPOSIT_ADDRESS: str = "/sapi/v1/capital/deposit/address"
    WITHDRAW_APPLY: str = "/sapi/v1/capital/withdraw/apply"
    WITHDRAW_HISTORY: str = "/sapi/v1/capital/withdraw/history"


class Headers:
    """요청 헤더 이름"""

    API_KEY: str = "X-MBX-APIKEY"
    CONTENT_TYPE: str = "Content-Type"
    FORM_URLENCODED: str = "application/x-www-form-urlencoded"


class Defaults:
    """기본값 상수"""

    RECV_WINDOW_MS: int = 5000
    TIMEOUT_SEC: float = 30.0

    LOG_LEVEL: str = "INFO"


class Paths:
    """프로젝트 경로 상수 (pathlib 사용 - OS 독립적)"""

    # 디렉토리
    CONFIG_DIR: Path = PROJECT_ROOT / "config"
    LOGS_DIR: Path = PROJECT_ROOT / "logs"

    # 설정 파일
    SECRETS_FILE: Path = CONFIG_DIR / "secrets.yaml"


class RateLimitThresholds:
    """Rate Limit 임계값 (Spot IP weight, 1분 한도 6000)"""

    WEIGHT_WARN: int = 4500  # 경고
    WEIGHT_SLOW: int = 5400  # 속도 저하
    WEIGHT_STOP: int = 5900  # 요청 중단
