"""외부 협력자 인터페이스

예약 서비스(BookingService)와 대화형 입력(Prompter)의 추상 경계.
코어 로직은 이 인터페이스에만 의존하므로 테스트에서 대체할 수 있다.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass
from typing import Any, Generic, Optional, TypeVar

from trainline_cli.models.trip import BookedTrip, Station, Trip

T = TypeVar("T")

# 입력 텍스트 → 제안 목록. 오래된 요청이면 None.
SuggestionSource = Callable[[str], Awaitable[Optional[list[str]]]]


class BookingService(ABC):
    """예약 서비스 경계

    규칙:
    - 전송 오류는 ServiceUnavailable
    - 로그인 거부는 AuthenticationError
    """

    @abstractmethod
    async def signin(self, email: str, password: str) -> dict[str, Any]:
        """로그인 → 세션 payload (meta.token, user, passengers, stations)"""

    @abstractmethod
    async def search_station(self, text: str) -> list[Station]:
        """역 이름 검색 (서비스 순위 순)"""

    @abstractmethod
    async def search_trips(
        self,
        origin_id: str,
        destination_id: str,
        passenger_ids: Sequence[str],
        departure_date: str,
    ) -> list[Trip]:
        """여정 검색. 결과 없으면 빈 목록."""

    @abstractmethod
    async def trips(self) -> list[BookedTrip]:
        """예약된 여정 목록"""

    @abstractmethod
    async def basket(self) -> list[BookedTrip]:
        """장바구니 목록"""

    async def close(self) -> None:
        """정리 (선택적 오버라이드)"""


@dataclass(frozen=True)
class Choice(Generic[T]):
    """선택지 (name: 표시 문자열, short: 선택 후 요약)"""

    name: str
    value: T
    checked: bool = False
    short: str = ""


class Prompter(ABC):
    """대화형 입력 경계. 사용자가 중단하면 PromptAborted."""

    @abstractmethod
    async def autocomplete(
        self,
        message: str,
        source: SuggestionSource,
        page_size: int = 5,
        highlight: Optional[Callable[[str], str]] = None,
    ) -> str:
        """입력할 때마다 source로 제안을 받아 하나를 확정 (highlight: 표시 전용 변환)"""

    @abstractmethod
    async def select(
        self,
        message: str,
        choices: Sequence[Choice[T]],
    ) -> T:
        """단일 선택"""

    @abstractmethod
    async def checkbox(self, message: str, choices: Sequence[Choice[T]]) -> list[T]:
        """다중 선택 (checked 가 기본값)"""

    def notify(self, message: str) -> None:
        """사용자에게 안내 메시지 출력"""
        print(message)
