"""
pytest 공통 fixture 정의

Capital 클라이언트 secrets.yaml 픽스처 (모드별 API 키 + client 섹션)
"""

import tempfile
from pathlib import Path
from typing import Any

import pytest
import yaml

# 모드별 자격 증명 (로더/CLI 테스트에서 값 그대로 비교)
PRODUCTION_KEYS = {"api_key": "prod_api_key_12345", "api_secret": "prod_api_secret_67890"}
TESTNET_KEYS = {"api_key": "test_api_key_abcde", "api_secret": "test_api_secret_fghij"}


def _write_secrets(path: Path, mode: str, client: dict[str, Any] | None = None) -> Path:
    """mode + production/testnet 섹션 (+ 선택적 client 섹션) 기록"""
    data: dict[str, Any] = {
        "mode": mode,
        "production": dict(PRODUCTION_KEYS),
        "testnet": dict(TESTNET_KEYS),
    }
    if client is not None:
        data["client"] = client

    path.write_text(yaml.safe_dump(data, sort_keys=False), encoding="utf-8")
    return path


@pytest.fixture
def temp_dir() -> Path:
    """로그/secrets 파일용 임시 디렉토리"""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def temp_secrets_file(temp_dir: Path) -> Path:
    """testnet 모드, client 섹션 없음 (recv_window/timeout 기본값)"""
    return _write_secrets(temp_dir / "secrets.yaml", "testnet")


@pytest.fixture
def temp_secrets_file_production(temp_dir: Path) -> Path:
    """production 모드, client 섹션으로 recv_window/timeout 지정"""
    return _write_secrets(
        temp_dir / "secrets_prod.yaml",
        "production",
        client={"recv_window": 10000, "timeout": 15},
    )


@pytest.fixture
def temp_secrets_file_invalid_mode(temp_dir: Path) -> Path:
    """production/testnet 외 모드 -> 로드 실패 (CLI exit 1)"""
    return _write_secrets(temp_dir / "secrets_invalid.yaml", "invalid_mode")
