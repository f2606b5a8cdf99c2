"""데이터 모델: 검색 워크플로 상태, 최종 결과

QueryState는 하나의 워크플로 실행 동안만 존재하는 불변 스냅샷이다.
각 단계는 dataclasses.replace로 새 스냅샷을 만든다.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum, auto
from typing import Optional

from trainline_cli.agent.state import ResolutionState
from trainline_cli.models.trip import FareOption, Station, Trip


@dataclass(frozen=True, slots=True)
class QueryState:
    """누적된 사용자 응답 + 해석 결과"""

    stage: ResolutionState = ResolutionState.SELECT_ORIGIN
    from_name: str = ""
    to_name: str = ""
    departure_date_label: str = ""
    hour_label: str = ""
    passenger_ids: tuple[str, ...] = ()
    origin: Optional[Station] = None
    destination: Optional[Station] = None
    departure: Optional[datetime] = None
    trips: tuple[Trip, ...] = ()
    travel_classes: dict[str, FareOption] = field(default_factory=dict)

    @property
    def departure_iso(self) -> str:
        if self.departure is None:
            return ""
        return self.departure.isoformat()

    def summary(self) -> str:
        return (
            f"{self.from_name or '?'}→{self.to_name or '?'} "
            f"{self.departure_iso or '?'} "
            f"{len(self.passenger_ids)} passenger(s)"
        )


class Outcome(Enum):
    RESOLVED = auto()
    NO_TRIPS = auto()
    ABORTED = auto()
    FAILED = auto()


@dataclass(frozen=True, slots=True)
class Resolution:
    """워크플로 종료 결과. trip_id는 RESOLVED일 때만 존재."""

    outcome: Outcome
    trip_id: Optional[str] = None
    message: str = ""

    @property
    def is_resolved(self) -> bool:
        return self.outcome is Outcome.RESOLVED
