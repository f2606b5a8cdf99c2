"""클라이언트 설정 모델"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path


def _default_storage_path() -> Path:
    return Path.home() / ".trainline-cli" / "uinfos.json"


@dataclass
class ClientConfig:
    """클라이언트 설정 - API / 저장소 / 프롬프트 파라미터"""

    # API 설정
    base_url: str = "https://www.trainline.eu"
    api_path: str = "/api/v5_1"
    user_agent: str = "CaptainTrain/43(4302) Android/4.4.2(19)"

    # HTTP 설정
    request_timeout: float = 15.0
    connect_timeout: float = 5.0
    max_connections: int = 3

    # 로그인 정보 저장 위치
    storage_path: Path = field(default_factory=_default_storage_path)

    # 검색 프롬프트 설정
    days_ahead: int = 90
    hour_slots: tuple[str, ...] = (
        "6h", "8h", "10h", "12h", "14h", "16h", "18h", "20h", "22h",
    )
    page_size: int = 5

    # 목록 출력
    trips_listing_limit: int = 7
