"""여정 구성 스킬

검색 결과의 구간 목록에서 경유지(환승 대기)를 계산하고,
한 줄 표시용 요금/소요 시간 요약을 만든다.
"""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Optional

from trainline_cli.models.errors import InvalidItinerary
from trainline_cli.models.trip import FareOption, Stop, Trip
from trainline_cli.skills.duration import format_duration

logger = logging.getLogger("trainline.skill.itinerary")

PRIMARY_CLASS = "economy"
SECONDARY_CLASS = "first"


@dataclass(frozen=True, slots=True)
class FareSummary:
    primary: FareOption
    secondary: Optional[FareOption] = None


@dataclass(frozen=True, slots=True)
class Headline:
    duration: str
    departure_time: str
    arrival_time: str


def _millis(delta_seconds: float) -> int:
    return int(round(delta_seconds * 1000))


def build_stops(trip: Trip) -> Trip:
    """구간 i-1 도착 ~ 구간 i 출발 사이를 경유지로 계산해 붙인 Trip 반환.

    구간이 하나면 경유지 없음 (직통). 대기 시간이 음수면 InvalidItinerary.
    """
    stops: list[Stop] = []
    segments = trip.segments
    for i in range(1, len(segments)):
        segment, previous = segments[i], segments[i - 1]
        wait = segment.departure_date - previous.arrival_date
        duration = _millis(wait.total_seconds())
        if duration < 0:
            raise InvalidItinerary(
                f"Segment {i} departs from {segment.departure_station} "
                f"before segment {i - 1} arrives"
            )
        stops.append(Stop(
            station=segment.departure_station,
            train_name=segment.train_name,
            duration=duration,
        ))
    return dataclasses.replace(trip, stops=tuple(stops))


def humanify_trips(trips: Iterable[Trip]) -> list[Trip]:
    """모든 여정에 경유지 계산. 요금이 없거나 잘못된 여정은 제외 (전체 검색은 유지)."""
    result: list[Trip] = []
    for trip in trips:
        if not trip.travel_classes:
            logger.warning("요금 없는 여정 제외: %s", trip.summary())
            continue
        try:
            result.append(build_stops(trip))
        except InvalidItinerary as e:
            logger.warning("여정 제외 (%s): %s", trip.summary(), e)
    return result


def summarize_fare(trip: Trip) -> FareSummary:
    """economy 요금을 기본으로, first 요금이 있으면 함께 반환"""
    if not trip.travel_classes:
        raise InvalidItinerary(f"No fare for trip {trip.summary()}")

    primary = trip.travel_classes.get(PRIMARY_CLASS)
    if primary is None:
        primary = next(iter(trip.travel_classes.values()))
    secondary = trip.travel_classes.get(SECONDARY_CLASS)
    if secondary is primary:
        secondary = None
    return FareSummary(primary=primary, secondary=secondary)


def headline(trip: Trip) -> Headline:
    """총 소요 시간 + 출발/도착 시각 (HH:MM)"""
    total = trip.arrival_date - trip.departure_date
    return Headline(
        duration=format_duration(_millis(total.total_seconds())),
        departure_time=f"{trip.departure_date:%H:%M}",
        arrival_time=f"{trip.arrival_date:%H:%M}",
    )
