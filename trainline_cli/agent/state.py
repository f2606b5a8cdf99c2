"""검색 워크플로 상태 머신

상태 전이 규칙을 정의하고 검증한다.
전이는 항상 앞으로만 진행하며, 재입력은 같은 상태에 머무는 것으로 처리한다.
"""

from __future__ import annotations

from enum import Enum, auto


class ResolutionState(Enum):
    SELECT_ORIGIN = auto()
    SELECT_DESTINATION = auto()
    SELECT_DATE_AND_HOUR = auto()
    SELECT_PASSENGERS = auto()
    SEARCH = auto()
    SELECT_ITINERARY = auto()
    RESOLVE_FARE_CLASS = auto()
    RESOLVED = auto()
    NO_TRIPS = auto()
    ABORTED = auto()
    FAILED = auto()


TERMINAL_STATES: frozenset[ResolutionState] = frozenset({
    ResolutionState.RESOLVED,
    ResolutionState.NO_TRIPS,
    ResolutionState.ABORTED,
    ResolutionState.FAILED,
})

# 허용된 상태 전이 맵: {현재상태: {허용되는 다음 상태들}}
_VALID_TRANSITIONS: dict[ResolutionState, frozenset[ResolutionState]] = {
    ResolutionState.SELECT_ORIGIN: frozenset({
        ResolutionState.SELECT_DESTINATION,
        ResolutionState.ABORTED, ResolutionState.FAILED,
    }),
    ResolutionState.SELECT_DESTINATION: frozenset({
        ResolutionState.SELECT_DATE_AND_HOUR,
        ResolutionState.ABORTED, ResolutionState.FAILED,
    }),
    ResolutionState.SELECT_DATE_AND_HOUR: frozenset({
        ResolutionState.SELECT_PASSENGERS, ResolutionState.ABORTED,
    }),
    ResolutionState.SELECT_PASSENGERS: frozenset({
        ResolutionState.SEARCH,
        ResolutionState.ABORTED, ResolutionState.FAILED,
    }),
    ResolutionState.SEARCH: frozenset({
        ResolutionState.SELECT_ITINERARY, ResolutionState.NO_TRIPS,
        ResolutionState.ABORTED, ResolutionState.FAILED,
    }),
    ResolutionState.SELECT_ITINERARY: frozenset({
        ResolutionState.RESOLVE_FARE_CLASS,
        ResolutionState.RESOLVED,  # 등급이 하나면 바로 확정
        ResolutionState.ABORTED,
    }),
    ResolutionState.RESOLVE_FARE_CLASS: frozenset({
        ResolutionState.RESOLVED, ResolutionState.ABORTED,
    }),
    # 터미널 상태
    ResolutionState.RESOLVED: frozenset(),
    ResolutionState.NO_TRIPS: frozenset(),
    ResolutionState.ABORTED: frozenset(),
    ResolutionState.FAILED: frozenset(),
}


def validate_transition(current: ResolutionState, target: ResolutionState) -> bool:
    """상태 전이가 유효한지 검증"""
    allowed = _VALID_TRANSITIONS.get(current, frozenset())
    return target in allowed
