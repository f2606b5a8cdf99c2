"""데이터 모델: 역, 승객, 구간, 경유지, 요금, 여정

모든 모델은 frozen=True + slots=True로 불변성을 보장한다.
Stop과 Trip.stops는 서비스가 반환하지 않는 파생 값이다.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime


@dataclass(frozen=True, slots=True)
class Station:
    """역 (식별자 = id)"""

    id: str
    name: str


@dataclass(frozen=True, slots=True)
class Passenger:
    """계정에 등록된 승객. is_selected는 기본 선택값일 뿐 강제하지 않는다."""

    id: str
    first_name: str
    last_name: str
    is_selected: bool = False

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"


@dataclass(frozen=True, slots=True)
class Segment:
    """여정의 한 구간 (직통 운행 단위)"""

    departure_station: str
    arrival_station: str
    departure_date: datetime
    arrival_date: datetime
    train_name: str


@dataclass(frozen=True, slots=True)
class Stop:
    """두 구간 사이의 환승 대기 (duration: 밀리초)"""

    station: str
    train_name: str
    duration: int


@dataclass(frozen=True, slots=True)
class FareOption:
    """등급별 요금. 같은 여정이라도 등급마다 trip_id가 다르다."""

    cents: int
    currency: str
    trip_id: str


@dataclass(frozen=True, slots=True)
class Trip:
    """검색 결과 여정"""

    departure_station: str
    arrival_station: str
    departure_date: datetime
    arrival_date: datetime
    segments: tuple[Segment, ...]
    travel_classes: dict[str, FareOption]
    stops: tuple[Stop, ...] = field(default_factory=tuple)

    @property
    def is_direct(self) -> bool:
        return len(self.segments) <= 1

    def summary(self) -> str:
        return (
            f"{self.departure_station} {self.departure_date:%H:%M} > "
            f"{self.arrival_date:%H:%M} {self.arrival_station}"
        )


@dataclass(frozen=True, slots=True)
class BookedTrip:
    """예약/장바구니 목록 표시용 여정"""

    reference: str
    departure_date: datetime
    arrival_date: datetime
    departure_station: Station
    arrival_station: Station
    passenger_first_name: str
    cents: int
    currency: str


def format_price(cents: int) -> str:
    """센트 → 표시용 금액 (4500 → '45', 4550 → '45.50')"""
    if cents % 100 == 0:
        return str(cents // 100)
    return f"{cents / 100:.2f}"
