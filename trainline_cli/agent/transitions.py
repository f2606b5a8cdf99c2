"""검색 워크플로 상태 전이 함수

각 단계는 (QueryState, 사용자 입력) → QueryState | Resolution 순수 함수다.
입출력 장치와 무관하므로 터미널 없이 동기적으로 테스트할 수 있다.
복구 가능한 오류(InvalidDate, EmptySelection, NotFound)는 예외로 던지고
호출 측이 같은 단계를 다시 묻는다.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Iterable, Sequence
from datetime import date
from typing import Any, Optional, Union

from trainline_cli.agent.state import ResolutionState, validate_transition
from trainline_cli.models.errors import EmptySelection, NotFound
from trainline_cli.models.query import Outcome, QueryState, Resolution
from trainline_cli.models.trip import Passenger, Station, Trip
from trainline_cli.skills.dates import parse_departure
from trainline_cli.skills.itinerary import humanify_trips

StepResult = Union[QueryState, Resolution]

NO_TRIPS_MESSAGE = "No trips found"
ABORTED_MESSAGE = "Search aborted"

_OUTCOME_STATES = {
    Outcome.RESOLVED: ResolutionState.RESOLVED,
    Outcome.NO_TRIPS: ResolutionState.NO_TRIPS,
    Outcome.ABORTED: ResolutionState.ABORTED,
    Outcome.FAILED: ResolutionState.FAILED,
}


def _check(current: ResolutionState, target: ResolutionState) -> None:
    if not validate_transition(current, target):
        raise ValueError(f"Invalid transition: {current.name} → {target.name}")


def _advance(state: QueryState, target: ResolutionState, **changes: Any) -> QueryState:
    _check(state.stage, target)
    return dataclasses.replace(state, stage=target, **changes)


def _finish(
    state: QueryState,
    outcome: Outcome,
    trip_id: Optional[str] = None,
    message: str = "",
) -> Resolution:
    _check(state.stage, _OUTCOME_STATES[outcome])
    return Resolution(outcome=outcome, trip_id=trip_id, message=message)


def apply_origin(state: QueryState, text: str, station: Station) -> QueryState:
    return _advance(
        state, ResolutionState.SELECT_DESTINATION,
        from_name=text, origin=station,
    )


def apply_destination(state: QueryState, text: str, station: Station) -> QueryState:
    return _advance(
        state, ResolutionState.SELECT_DATE_AND_HOUR,
        to_name=text, destination=station,
    )


def apply_date_and_hour(
    state: QueryState,
    label: str,
    hour_label: str,
    today: Optional[date] = None,
) -> QueryState:
    """라벨 + 시간대 → departure. 해석 실패 시 InvalidDate (상태 유지)."""
    _check(state.stage, ResolutionState.SELECT_PASSENGERS)
    departure = parse_departure(label, hour_label, today)
    return _advance(
        state, ResolutionState.SELECT_PASSENGERS,
        departure_date_label=label, hour_label=hour_label, departure=departure,
    )


def order_passengers(passengers: Iterable[Passenger]) -> list[Passenger]:
    """기본 선택된 승객을 앞으로 (같은 그룹 안에서는 원래 순서 유지)"""
    return sorted(passengers, key=lambda p: not p.is_selected)


def apply_passengers(state: QueryState, passenger_ids: Sequence[str]) -> QueryState:
    """최소 한 명 필요. 비어 있으면 EmptySelection."""
    _check(state.stage, ResolutionState.SEARCH)
    if not passenger_ids:
        raise EmptySelection()
    return _advance(
        state, ResolutionState.SEARCH, passenger_ids=tuple(passenger_ids),
    )


def apply_search_results(state: QueryState, trips: Iterable[Trip]) -> StepResult:
    """검색 결과에 경유지 계산. 표시할 여정이 없으면 NO_TRIPS로 종료."""
    shown = humanify_trips(trips)
    if not shown:
        return _finish(state, Outcome.NO_TRIPS, message=NO_TRIPS_MESSAGE)
    return _advance(state, ResolutionState.SELECT_ITINERARY, trips=tuple(shown))


def apply_itinerary(state: QueryState, trip: Trip) -> StepResult:
    """선택된 여정의 등급 목록. 등급이 하나면 바로 trip_id 확정."""
    if trip not in state.trips:
        raise NotFound(trip.summary())

    classes = trip.travel_classes
    if len(classes) == 1:
        fare = next(iter(classes.values()))
        return _finish(state, Outcome.RESOLVED, trip_id=fare.trip_id)
    return _advance(
        state, ResolutionState.RESOLVE_FARE_CLASS, travel_classes=dict(classes),
    )


def apply_fare_class(state: QueryState, class_name: str) -> Resolution:
    """선택한 등급의 trip_id. 표시된 등급이 아니면 NotFound (임의 생성 없음)."""
    fare = state.travel_classes.get(class_name)
    if fare is None:
        raise NotFound(class_name)
    return _finish(state, Outcome.RESOLVED, trip_id=fare.trip_id)


def abort(state: QueryState, message: str = ABORTED_MESSAGE) -> Resolution:
    return _finish(state, Outcome.ABORTED, message=message)


def fail(state: QueryState, message: str) -> Resolution:
    return _finish(state, Outcome.FAILED, message=message)
