"""TripResolutionOrchestrator 단위 테스트"""

from __future__ import annotations

from unittest.mock import AsyncMock, patch

import pytest

from conftest import LYON, PARIS, ScriptedPrompter
from trainline_cli.agents.base import AgentLifecycle
from trainline_cli.agents.orchestrator import TripResolutionOrchestrator
from trainline_cli.models.errors import AuthenticationError, PromptAborted, ServiceUnavailable
from trainline_cli.models.query import Outcome, QueryState
from trainline_cli.models.session import Session

# 출발역 / 도착역 / 날짜 자동완성 기본 응답
STATIONS = [("paris", 0), ("lyon", 0)]
DATE = ("Monday, January 5", 0)


def _orchestrator(service, session, prompter, today, **kwargs) -> TripResolutionOrchestrator:
    return TripResolutionOrchestrator(service, session, prompter, today=today, **kwargs)


class TestHappyPath:
    @pytest.mark.asyncio
    async def test_single_class_resolves_without_class_prompt(
        self, fake_service, sample_session, new_year_day,
    ) -> None:
        prompter = ScriptedPrompter(
            autocomplete=[*STATIONS, DATE],
            select=["14h", 0],
            checkbox=[None],
        )
        orch = _orchestrator(fake_service, sample_session, prompter, new_year_day)

        resolution = await orch.resolve()

        assert resolution.outcome is Outcome.RESOLVED
        assert resolution.trip_id == "T1"
        # 시간대 + 여정 선택만 (등급 선택 없음)
        assert [msg for msg, _ in prompter.select_calls] == ["Time:", "Available trips:"]
        assert fake_service.search_calls == [("1", "2", ["7"], "2026-01-05T14:00:00")]

    @pytest.mark.asyncio
    async def test_two_classes_prompt_for_class(
        self, fake_service, sample_session, connecting_trip, new_year_day,
    ) -> None:
        fake_service.found_trips = [connecting_trip]
        prompter = ScriptedPrompter(
            autocomplete=[*STATIONS, DATE],
            select=["14h", 0, "first"],
            checkbox=[None],
        )
        orch = _orchestrator(fake_service, sample_session, prompter, new_year_day)

        resolution = await orch.resolve()

        assert resolution.trip_id == "F-42"
        message, choices = prompter.select_calls[-1]
        assert message == "Travel class:"
        assert [c.name for c in choices] == ["Economy: 89 EUR", "First: 129.50 EUR"]

    @pytest.mark.asyncio
    async def test_hour_slots_offered_in_order(
        self, fake_service, sample_session, new_year_day,
    ) -> None:
        prompter = ScriptedPrompter(
            autocomplete=[*STATIONS, DATE], select=["6h", 0], checkbox=[None],
        )
        orch = _orchestrator(fake_service, sample_session, prompter, new_year_day)

        await orch.resolve()

        _, hours = prompter.select_calls[0]
        assert hours[0].value == "6h"
        assert hours[-1].value == "22h"
        assert fake_service.search_calls[0][3] == "2026-01-05T06:00:00"

    @pytest.mark.asyncio
    async def test_passengers_checked_first(
        self, fake_service, sample_session, new_year_day,
    ) -> None:
        prompter = ScriptedPrompter(
            autocomplete=[*STATIONS, DATE], select=["14h", 0], checkbox=[None],
        )
        orch = _orchestrator(fake_service, sample_session, prompter, new_year_day)

        await orch.resolve()

        _, choices = prompter.checkbox_calls[0]
        assert [(c.value, c.checked) for c in choices] == [("7", True), ("8", False)]


class TestRecoverableErrors:
    @pytest.mark.asyncio
    async def test_unknown_station_reprompts(
        self, fake_service, sample_session, new_year_day,
    ) -> None:
        prompter = ScriptedPrompter(
            autocomplete=["Atlantis", *STATIONS, DATE],
            select=["14h", 0],
            checkbox=[None],
        )
        orch = _orchestrator(fake_service, sample_session, prompter, new_year_day)

        resolution = await orch.resolve()

        assert resolution.is_resolved
        assert "No match found for 'Atlantis'" in prompter.messages

    @pytest.mark.asyncio
    async def test_invalid_date_reprompts(
        self, fake_service, sample_session, new_year_day,
    ) -> None:
        prompter = ScriptedPrompter(
            autocomplete=[*STATIONS, "Sunday, January 5", DATE],
            select=["14h", "14h", 0],
            checkbox=[None],
        )
        orch = _orchestrator(fake_service, sample_session, prompter, new_year_day)

        resolution = await orch.resolve()

        assert resolution.is_resolved
        assert len(prompter.messages) == 1
        assert fake_service.search_calls[0][3] == "2026-01-05T14:00:00"

    @pytest.mark.asyncio
    async def test_empty_selection_reprompts(
        self, fake_service, sample_session, new_year_day,
    ) -> None:
        prompter = ScriptedPrompter(
            autocomplete=[*STATIONS, DATE],
            select=["14h", 0],
            checkbox=[[], ["8"]],
        )
        orch = _orchestrator(fake_service, sample_session, prompter, new_year_day)

        resolution = await orch.resolve()

        assert resolution.is_resolved
        assert "Please select at least one passenger" in prompter.messages
        assert fake_service.search_calls[0][2] == ["8"]


class TestTerminalOutcomes:
    @pytest.mark.asyncio
    async def test_abort_at_first_prompt(
        self, fake_service, sample_session, new_year_day,
    ) -> None:
        prompter = ScriptedPrompter(autocomplete=[PromptAborted()])
        orch = _orchestrator(fake_service, sample_session, prompter, new_year_day)

        resolution = await orch.resolve()

        assert resolution.outcome is Outcome.ABORTED
        assert resolution.trip_id is None
        assert fake_service.search_calls == []

    @pytest.mark.asyncio
    async def test_abort_at_itinerary(
        self, fake_service, sample_session, new_year_day,
    ) -> None:
        prompter = ScriptedPrompter(
            autocomplete=[*STATIONS, DATE],
            select=["14h", PromptAborted()],
            checkbox=[None],
        )
        orch = _orchestrator(fake_service, sample_session, prompter, new_year_day)

        resolution = await orch.resolve()

        assert resolution.outcome is Outcome.ABORTED
        assert len(fake_service.search_calls) == 1

    @pytest.mark.asyncio
    async def test_no_trips(self, fake_service, sample_session, new_year_day) -> None:
        fake_service.found_trips = []
        prompter = ScriptedPrompter(
            autocomplete=[*STATIONS, DATE], select=["14h"], checkbox=[None],
        )
        orch = _orchestrator(fake_service, sample_session, prompter, new_year_day)

        resolution = await orch.resolve()

        assert resolution.outcome is Outcome.NO_TRIPS
        assert resolution.message == "No trips found"
        assert resolution.trip_id is None

    @pytest.mark.asyncio
    async def test_search_failure(self, fake_service, sample_session, new_year_day) -> None:
        fake_service.fail_search = True
        prompter = ScriptedPrompter(
            autocomplete=[*STATIONS, DATE], select=["14h"], checkbox=[None],
        )
        orch = _orchestrator(fake_service, sample_session, prompter, new_year_day)

        resolution = await orch.resolve()

        assert resolution.outcome is Outcome.FAILED
        assert resolution.trip_id is None
        assert "Service unavailable: connection reset" in prompter.messages

    @pytest.mark.asyncio
    async def test_station_lookup_failure(
        self, fake_service, sample_session, new_year_day,
    ) -> None:
        prompter = ScriptedPrompter(autocomplete=[("paris", 0)])
        orch = _orchestrator(fake_service, sample_session, prompter, new_year_day)

        with patch.object(
            fake_service, "search_station",
            new_callable=AsyncMock,
            side_effect=ServiceUnavailable("timeout"),
        ):
            resolution = await orch.resolve()

        assert resolution.outcome is Outcome.FAILED

    @pytest.mark.asyncio
    async def test_no_registered_passenger(self, fake_service, new_year_day) -> None:
        session = Session(token="tok", first_name="Ada", last_name="L", stations=(PARIS, LYON))
        prompter = ScriptedPrompter(autocomplete=[*STATIONS, DATE], select=["14h"])
        orch = _orchestrator(fake_service, session, prompter, new_year_day)

        resolution = await orch.resolve()

        assert resolution.outcome is Outcome.FAILED
        assert prompter.checkbox_calls == []
        assert fake_service.search_calls == []


class TestLifecycle:
    @pytest.mark.asyncio
    async def test_state_discarded_after_run(
        self, fake_service, sample_session, new_year_day,
    ) -> None:
        prompter = ScriptedPrompter(
            autocomplete=[*STATIONS, DATE], select=["14h", 0], checkbox=[None],
        )
        orch = _orchestrator(fake_service, sample_session, prompter, new_year_day)

        await orch.resolve()

        assert orch.state == QueryState()
        assert orch.lifecycle == AgentLifecycle.CLOSED
        assert orch.resolution is not None


class TestExpiredSession:
    @pytest.mark.asyncio
    async def test_rejected_search_fails_cleanly(
        self, fake_service, sample_session, new_year_day, caplog,
    ) -> None:
        prompter = ScriptedPrompter(
            autocomplete=[*STATIONS, DATE], select=["14h"], checkbox=[None],
        )
        orch = _orchestrator(fake_service, sample_session, prompter, new_year_day)

        with patch.object(
            fake_service, "search_trips",
            new_callable=AsyncMock,
            side_effect=AuthenticationError("Request rejected by the service (HTTP 401)"),
        ):
            resolution = await orch.resolve()

        assert resolution.outcome is Outcome.FAILED
        assert resolution.message == "Session expired, use --login [email]"
        assert prompter.messages == ["Session expired, use --login [email]"]
        assert all(record.exc_info is None for record in caplog.records)

    @pytest.mark.asyncio
    async def test_rejected_station_lookup(
        self, fake_service, sample_session, new_year_day,
    ) -> None:
        prompter = ScriptedPrompter(autocomplete=[("paris", 0)])
        orch = _orchestrator(fake_service, sample_session, prompter, new_year_day)

        with patch.object(
            fake_service, "search_station",
            new_callable=AsyncMock,
            side_effect=AuthenticationError("HTTP 403"),
        ):
            resolution = await orch.resolve()

        assert resolution.outcome is Outcome.FAILED
        assert orch.lifecycle == AgentLifecycle.CLOSED
