"""오케스트레이터 에이전트 (TripResolutionOrchestrator)

검색 워크플로 전체를 제어한다:
  출발역 → 도착역 → 날짜+시간대 → 승객 → 검색 → 여정 선택 → 등급 선택 → trip_id

상태 전이는 agent.transitions 의 순수 함수가 담당하고,
이 클래스는 프롬프트와 예약 서비스 호출(대기 지점)만 연결한다.

오류 처리:
  - NotFound / InvalidDate / EmptySelection → 안내 후 같은 단계 재입력
  - ServiceUnavailable → 안내 후 워크플로 종료 (FAILED)
  - AuthenticationError (토큰 만료) → 재로그인 안내 후 종료 (FAILED)
  - PromptAborted → 상태 폐기 후 종료 (ABORTED)
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import date
from typing import Optional

from trainline_cli.agent import transitions
from trainline_cli.agent.state import ResolutionState
from trainline_cli.agents.base import BaseAgent
from trainline_cli.models.config import ClientConfig
from trainline_cli.models.errors import (
    AuthenticationError,
    EmptySelection,
    InvalidDate,
    NotFound,
    PromptAborted,
    ServiceUnavailable,
)
from trainline_cli.models.query import QueryState, Resolution
from trainline_cli.models.session import Session
from trainline_cli.models.trip import Station, format_price
from trainline_cli.skills.base import BookingService, Choice, Prompter
from trainline_cli.skills.dates import next_days
from trainline_cli.skills.fuzzy import fuzzy_filter
from trainline_cli.skills.station_resolver import StationResolver
from trainline_cli.skills.suggestions import LatestOnly
from trainline_cli.utils.render import itinerary_block, style_date

logger = logging.getLogger("trainline.agent.orchestrator")

SESSION_EXPIRED_MESSAGE = "Session expired, use --login [email]"


class TripResolutionOrchestrator(BaseAgent):
    """검색 워크플로 오케스트레이터

    단일 검색 = 단일 실행. QueryState는 실행 동안 이 인스턴스만 소유하고
    종료 시 폐기된다.
    """

    def __init__(
        self,
        service: BookingService,
        session: Session,
        prompter: Prompter,
        config: Optional[ClientConfig] = None,
        today: Callable[[], date] = date.today,
    ) -> None:
        super().__init__("orchestrator")
        self._service = service
        self._session = session
        self._prompter = prompter
        self._config = config or ClientConfig()
        self._today = today
        self._resolver = StationResolver(service, session)
        self._suggestions: dict[str, LatestOnly[list[str]]] = {
            name: LatestOnly(name) for name in ("from", "to", "departure_date")
        }
        self._state = QueryState()
        self._resolution: Optional[Resolution] = None

    @property
    def state(self) -> QueryState:
        return self._state

    @property
    def resolution(self) -> Optional[Resolution]:
        return self._resolution

    async def setup(self) -> None:
        self._state = QueryState()
        self._resolution = None
        logger.debug("검색 워크플로 시작 (%s)", self._session.display_name)

    async def run(self) -> None:
        self._resolution = await self._resolve()
        logger.info("워크플로 종료: %s", self._resolution.outcome.name)

    async def teardown(self) -> None:
        # 실행이 끝나면 누적 응답은 폐기
        self._state = QueryState()

    async def resolve(self) -> Resolution:
        """워크플로 실행 → 최종 Resolution"""
        await self.start()
        assert self._resolution is not None
        return self._resolution

    async def _resolve(self) -> Resolution:
        try:
            await self._select_station("from", "From:", transitions.apply_origin)
            await self._select_station("to", "To:", transitions.apply_destination)
            await self._select_date_and_hour()
            result = await self._select_passengers()
            if isinstance(result, Resolution):
                return result
            result = await self._search()
            if isinstance(result, Resolution):
                return result
            result = await self._select_itinerary()
            if isinstance(result, Resolution):
                return result
            return await self._select_fare_class()
        except PromptAborted:
            logger.info("사용자 중단 (%s)", self._state.stage.name)
            return transitions.abort(self._state)
        except AuthenticationError as e:
            # 저장된 토큰 만료
            logger.warning("인증 거부 (%s): %s", self._state.stage.name, e)
            self._prompter.notify(SESSION_EXPIRED_MESSAGE)
            return transitions.fail(self._state, SESSION_EXPIRED_MESSAGE)
        except ServiceUnavailable as e:
            logger.error("서비스 오류 (%s): %s", self._state.stage.name, e)
            self._prompter.notify(f"Service unavailable: {e}")
            return transitions.fail(self._state, str(e))

    async def _select_station(
        self,
        field: str,
        message: str,
        apply: Callable[[QueryState, str, Station], QueryState],
    ) -> None:
        tracker = self._suggestions[field]

        async def source(text: str) -> Optional[list[str]]:
            return await tracker.run(lambda: self._resolver.resolve(text))

        while True:
            name = await self._prompter.autocomplete(
                message, source, page_size=self._config.page_size,
            )
            try:
                station = await self._resolver.identify(name)
            except NotFound as e:
                self._prompter.notify(str(e))
                continue
            self._state = apply(self._state, name, station)
            logger.info("%s %s (%s)", message, station.name, station.id)
            return

    async def _select_date_and_hour(self) -> None:
        candidates = next_days(self._config.days_ahead, self._today())
        by_label = {c.label: c for c in candidates}
        labels = list(by_label)
        tracker = self._suggestions["departure_date"]

        async def filter_labels(text: str) -> list[str]:
            return fuzzy_filter(text, labels)

        async def source(text: str) -> Optional[list[str]]:
            return await tracker.run(lambda: filter_labels(text))

        def highlight(label: str) -> str:
            candidate = by_label.get(label)
            return style_date(candidate) if candidate else label

        hours = [Choice(name=h, value=h) for h in self._config.hour_slots]
        while True:
            label = await self._prompter.autocomplete(
                "Departure date:", source,
                page_size=self._config.page_size, highlight=highlight,
            )
            hour = await self._prompter.select("Time:", hours)
            try:
                self._state = transitions.apply_date_and_hour(
                    self._state, label, hour, self._today(),
                )
            except InvalidDate as e:
                self._prompter.notify(str(e))
                continue
            logger.info("출발 시각: %s", self._state.departure_iso)
            return

    async def _select_passengers(self) -> Optional[Resolution]:
        passengers = transitions.order_passengers(self._session.passengers)
        if not passengers:
            message = "No passenger registered on this account"
            self._prompter.notify(message)
            return transitions.fail(self._state, message)

        choices = [
            Choice(name=p.full_name, value=p.id, checked=p.is_selected)
            for p in passengers
        ]
        while True:
            selected = await self._prompter.checkbox("Passengers:", choices)
            try:
                self._state = transitions.apply_passengers(self._state, selected)
            except EmptySelection as e:
                self._prompter.notify(str(e))
                continue
            logger.info("승객 %d명 선택", len(self._state.passenger_ids))
            return None

    async def _search(self) -> Optional[Resolution]:
        state = self._state
        assert state.origin is not None and state.destination is not None
        logger.info("여정 검색: %s", state.summary())
        trips = await self._service.search_trips(
            state.origin.id,
            state.destination.id,
            list(state.passenger_ids),
            state.departure_iso,
        )
        result = transitions.apply_search_results(state, trips)
        if isinstance(result, Resolution):
            return result
        self._state = result
        return None

    async def _select_itinerary(self) -> Optional[Resolution]:
        choices = [
            Choice(name=itinerary_block(t), value=t, short=t.summary())
            for t in self._state.trips
        ]
        trip = await self._prompter.select("Available trips:", choices)
        result = transitions.apply_itinerary(self._state, trip)
        if isinstance(result, Resolution):
            return result
        self._state = result
        return None

    async def _select_fare_class(self) -> Resolution:
        assert self._state.stage is ResolutionState.RESOLVE_FARE_CLASS
        choices = [
            Choice(
                name=f"{name.capitalize()}: {format_price(fare.cents)} {fare.currency}",
                value=name,
            )
            for name, fare in self._state.travel_classes.items()
        ]
        class_name = await self._prompter.select("Travel class:", choices)
        return transitions.apply_fare_class(self._state, class_name)
