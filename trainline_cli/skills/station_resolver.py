"""역 해석 스킬

자유 입력 → 자동완성용 역 이름 목록 / 최종 Station.
빈 입력이면 사용자의 자주 쓰는 역(로컬), 아니면 서비스 검색.
"""

from __future__ import annotations

import logging

from trainline_cli.models.errors import NotFound
from trainline_cli.models.session import Session
from trainline_cli.models.trip import Station
from trainline_cli.skills.base import BookingService

logger = logging.getLogger("trainline.skill.station")


class StationResolver:
    """역 이름 자동완성 + 식별"""

    __slots__ = ("_service", "_session")

    def __init__(self, service: BookingService, session: Session) -> None:
        self._service = service
        self._session = session

    async def resolve(self, text: str) -> list[str]:
        """자동완성 후보 (서비스 순위 유지)"""
        query = text.strip()
        if not query:
            return [s.name for s in self._session.stations]
        stations = await self._service.search_station(query)
        return [s.name for s in stations]

    async def identify(self, text: str) -> Station:
        """첫 번째 검색 결과를 확정. 결과가 없으면 NotFound."""
        query = text.strip()
        if not query:
            raise NotFound(text)
        stations = await self._service.search_station(query)
        if not stations:
            raise NotFound(query)
        station = stations[0]
        logger.debug("역 확정: '%s' → %s (%s)", query, station.name, station.id)
        return station
