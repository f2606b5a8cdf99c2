"""pytest 공통 픽스처

모든 테스트에서 공유하는 샘플 데이터와 대체 협력자(예약 서비스, 프롬프트)를 제공한다.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from datetime import date, datetime
from typing import Any, Optional, TypeVar

import pytest

from trainline_cli.models.config import ClientConfig
from trainline_cli.models.errors import ServiceUnavailable
from trainline_cli.models.session import Session
from trainline_cli.models.trip import (
    BookedTrip,
    FareOption,
    Passenger,
    Segment,
    Station,
    Trip,
)
from trainline_cli.skills.base import BookingService, Choice, Prompter, SuggestionSource

T = TypeVar("T")

PARIS = Station(id="1", name="Paris Gare de Lyon")
LYON = Station(id="2", name="Lyon Part-Dieu")
DIJON = Station(id="3", name="Dijon Ville")
MARSEILLE = Station(id="4", name="Marseille Saint-Charles")


def make_trip(
    *segments: Segment,
    travel_classes: Optional[dict[str, FareOption]] = None,
) -> Trip:
    return Trip(
        departure_station=segments[0].departure_station,
        arrival_station=segments[-1].arrival_station,
        departure_date=segments[0].departure_date,
        arrival_date=segments[-1].arrival_date,
        segments=tuple(segments),
        travel_classes=travel_classes if travel_classes is not None else {
            "economy": FareOption(cents=4500, currency="EUR", trip_id="T1"),
        },
    )


class FakeBookingService(BookingService):
    """메모리 기반 예약 서비스"""

    def __init__(
        self,
        stations: Optional[dict[str, list[Station]]] = None,
        trips: Optional[list[Trip]] = None,
        booked: Optional[list[BookedTrip]] = None,
    ) -> None:
        self.stations = stations or {}
        self.found_trips = trips or []
        self.booked = booked or []
        self.station_queries: list[str] = []
        self.search_calls: list[tuple[str, str, list[str], str]] = []
        self.fail_search = False
        self.closed = False

    async def signin(self, email: str, password: str) -> dict[str, Any]:
        return {
            "meta": {"token": "tok"},
            "user": {"first_name": "Ada", "last_name": "Lovelace", "email": email},
            "passengers": [],
            "stations": [],
        }

    async def search_station(self, text: str) -> list[Station]:
        self.station_queries.append(text)
        return list(self.stations.get(text.lower(), []))

    async def search_trips(
        self,
        origin_id: str,
        destination_id: str,
        passenger_ids: Sequence[str],
        departure_date: str,
    ) -> list[Trip]:
        self.search_calls.append(
            (origin_id, destination_id, list(passenger_ids), departure_date)
        )
        if self.fail_search:
            raise ServiceUnavailable("connection reset")
        return list(self.found_trips)

    async def trips(self) -> list[BookedTrip]:
        return list(self.booked)

    async def basket(self) -> list[BookedTrip]:
        return list(self.booked[:1])

    async def close(self) -> None:
        self.closed = True


class ScriptedPrompter(Prompter):
    """미리 정해 둔 응답을 순서대로 돌려주는 프롬프트

    - autocomplete: (입력 텍스트, 제안 인덱스) 또는 문자열(그대로 확정)
    - select: 인덱스(int) 또는 선택지 value
    - checkbox: None(기본 선택 유지) 또는 value 목록
    예외 인스턴스를 넣으면 그 시점에 발생시킨다.
    """

    def __init__(
        self,
        autocomplete: Sequence[Any] = (),
        select: Sequence[Any] = (),
        checkbox: Sequence[Any] = (),
    ) -> None:
        self._autocomplete = list(autocomplete)
        self._select = list(select)
        self._checkbox = list(checkbox)
        self.messages: list[str] = []
        self.suggestions: list[tuple[str, Optional[list[str]]]] = []
        self.select_calls: list[tuple[str, list[Choice[Any]]]] = []
        self.checkbox_calls: list[tuple[str, list[Choice[Any]]]] = []

    @staticmethod
    def _next(answers: list[Any]) -> Any:
        answer = answers.pop(0)
        if isinstance(answer, BaseException):
            raise answer
        return answer

    async def autocomplete(
        self,
        message: str,
        source: SuggestionSource,
        page_size: int = 5,
        highlight: Optional[Callable[[str], str]] = None,
    ) -> str:
        answer = self._next(self._autocomplete)
        if isinstance(answer, tuple):
            text, index = answer
            suggestions = await source(text)
            self.suggestions.append((message, suggestions))
            assert suggestions, f"no suggestion for {text!r}"
            return suggestions[index]
        self.suggestions.append((message, await source(answer)))
        return answer

    async def select(self, message: str, choices: Sequence[Choice[T]]) -> T:
        self.select_calls.append((message, list(choices)))
        answer = self._next(self._select)
        if isinstance(answer, int) and not isinstance(answer, bool):
            return choices[answer].value
        return next(c.value for c in choices if c.value == answer)

    async def checkbox(self, message: str, choices: Sequence[Choice[T]]) -> list[T]:
        self.checkbox_calls.append((message, list(choices)))
        answer = self._next(self._checkbox)
        if answer is None:
            return [c.value for c in choices if c.checked]
        return list(answer)

    def notify(self, message: str) -> None:
        self.messages.append(message)


@pytest.fixture
def sample_config(tmp_path) -> ClientConfig:
    """임시 저장 경로를 쓰는 설정"""
    return ClientConfig(storage_path=tmp_path / "uinfos.json")


@pytest.fixture
def sample_session() -> Session:
    """파리/리옹을 자주 쓰는 역으로 가진 세션"""
    return Session(
        token="tok",
        first_name="Ada",
        last_name="Lovelace",
        email="ada@example.com",
        stations=(PARIS, LYON),
        passengers=(
            Passenger(id="8", first_name="Bob", last_name="Lovelace", is_selected=False),
            Passenger(id="7", first_name="Ada", last_name="Lovelace", is_selected=True),
        ),
    )


@pytest.fixture
def session_payload() -> dict[str, Any]:
    """로그인 응답 mock"""
    return {
        "meta": {"token": "tok"},
        "user": {"first_name": "Ada", "last_name": "Lovelace", "email": "ada@example.com"},
        "passengers": [
            {"id": 7, "first_name": "Ada", "last_name": "Lovelace", "is_selected": True},
            {"id": 8, "first_name": "Bob", "last_name": "Lovelace", "is_selected": False},
        ],
        "stations": [
            {"id": 1, "name": "Paris Gare de Lyon"},
            {"id": 2, "name": "Lyon Part-Dieu"},
        ],
    }


@pytest.fixture
def direct_trip() -> Trip:
    """직통 여정 (economy 한 등급)"""
    return make_trip(
        Segment(
            departure_station=PARIS.name,
            arrival_station=LYON.name,
            departure_date=datetime(2026, 1, 5, 14, 12),
            arrival_date=datetime(2026, 1, 5, 16, 16),
            train_name="TGV",
        ),
    )


@pytest.fixture
def connecting_trip() -> Trip:
    """2회 환승 여정 (economy / first)"""
    return make_trip(
        Segment(PARIS.name, DIJON.name, datetime(2026, 1, 5, 14, 0), datetime(2026, 1, 5, 15, 40), "TGV"),
        Segment(DIJON.name, LYON.name, datetime(2026, 1, 5, 15, 45), datetime(2026, 1, 5, 17, 30), "TER"),
        Segment(LYON.name, MARSEILLE.name, datetime(2026, 1, 5, 18, 30), datetime(2026, 1, 5, 20, 10), "TGV"),
        travel_classes={
            "economy": FareOption(cents=8900, currency="EUR", trip_id="E-42"),
            "first": FareOption(cents=12950, currency="EUR", trip_id="F-42"),
        },
    )


@pytest.fixture
def booked_trip() -> BookedTrip:
    return BookedTrip(
        reference="ABC123",
        departure_date=datetime(2026, 1, 5, 14, 12),
        arrival_date=datetime(2026, 1, 5, 16, 16),
        departure_station=PARIS,
        arrival_station=LYON,
        passenger_first_name="Ada",
        cents=4500,
        currency="EUR",
    )


@pytest.fixture
def fake_service(direct_trip: Trip) -> FakeBookingService:
    return FakeBookingService(
        stations={
            "paris": [PARIS],
            "paris gare de lyon": [PARIS],
            "lyon": [LYON],
            "lyon part-dieu": [LYON],
        },
        trips=[direct_trip],
    )


@pytest.fixture
def new_year_day() -> Callable[[], date]:
    """'오늘' 고정 (2026-01-01, 목요일)"""
    return lambda: date(2026, 1, 1)
