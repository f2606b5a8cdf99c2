"""예약 서비스 클라이언트 스킬

트레인라인 JSON API(/api/v5_1)를 aiohttp로 호출한다.
검색 응답은 id로 정규화된 trips / segments / stations 목록이므로
표시용 Trip 레코드로 평탄화하고, 같은 여정의 등급별 trip을 하나로 묶는다.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Sequence
from datetime import datetime
from typing import Any, ClassVar, Optional, TypeVar

import aiohttp

from trainline_cli.models.config import ClientConfig
from trainline_cli.models.errors import AuthenticationError, ServiceUnavailable
from trainline_cli.models.trip import BookedTrip, FareOption, Segment, Station, Trip
from trainline_cli.skills.base import BookingService

logger = logging.getLogger("trainline.skill.booking")

DEFAULT_TRAVEL_CLASS = "economy"

T = TypeVar("T")


class BookingClient(BookingService):
    """트레인라인 API 클라이언트"""

    HEADERS: ClassVar[dict[str, str]] = {
        "Accept": "application/json",
        "Content-Type": "application/json; charset=UTF-8",
        "Accept-Language": "en",
    }

    TRIPS_PATH: ClassVar[str] = "pnrs"
    BASKET_PATH: ClassVar[str] = "basket"

    def __init__(
        self,
        config: Optional[ClientConfig] = None,
        token: Optional[str] = None,
    ) -> None:
        self._config = config or ClientConfig()
        self._token = token
        self._session: Optional[aiohttp.ClientSession] = None

    @property
    def token(self) -> Optional[str]:
        return self._token

    @token.setter
    def token(self, value: Optional[str]) -> None:
        self._token = value

    async def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            timeout = aiohttp.ClientTimeout(
                total=self._config.request_timeout,
                connect=self._config.connect_timeout,
            )
            connector = aiohttp.TCPConnector(
                limit=self._config.max_connections,
                ttl_dns_cache=300,
            )
            self._session = aiohttp.ClientSession(
                timeout=timeout,
                connector=connector,
                headers={**self.HEADERS, "User-Agent": self._config.user_agent},
            )
        return self._session

    async def close(self) -> None:
        if self._session and not self._session.closed:
            await self._session.close()
        self._session = None

    async def __aenter__(self) -> BookingClient:
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.close()

    def _url(self, path: str) -> str:
        base = self._config.base_url.rstrip("/")
        api = self._config.api_path.strip("/")
        return f"{base}/{api}/{path.lstrip('/')}"

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[dict[str, str]] = None,
        payload: Optional[dict[str, Any]] = None,
    ) -> dict[str, Any]:
        """API 호출 → JSON dict. 전송/HTTP 오류와 JSON이 아닌 응답은 ServiceUnavailable."""
        session = await self._get_session()
        headers: dict[str, str] = {}
        if self._token:
            headers["Authorization"] = f'Token token="{self._token}"'

        url = self._url(path)
        logger.debug("%s %s", method, url)
        try:
            async with session.request(
                method, url, params=params, json=payload, headers=headers,
            ) as resp:
                if resp.status in (401, 403):
                    raise AuthenticationError(
                        f"Request rejected by the service (HTTP {resp.status})"
                    )
                resp.raise_for_status()
                data = await resp.json(content_type=None)
        except aiohttp.ClientResponseError as e:
            raise ServiceUnavailable(f"HTTP {e.status}: {e.message}") from e
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise ServiceUnavailable(f"Unable to reach {url}: {e!r}") from e
        except ValueError as e:
            # 점검 페이지 등 JSON이 아닌 본문
            raise ServiceUnavailable(f"Unexpected response from {url}") from e

        if not isinstance(data, dict):
            raise ServiceUnavailable(f"Unexpected response from {url}")
        return data

    async def signin(self, email: str, password: str) -> dict[str, Any]:
        data = await self._request(
            "POST", "account/signin",
            payload={"id": "1", "email": email, "password": password},
        )
        token = (data.get("meta") or {}).get("token")
        if not token:
            raise AuthenticationError("Wrong password or wrong email address")
        self._token = token
        return data

    async def search_station(self, text: str) -> list[Station]:
        data = await self._request(
            "GET", "stations", params={"context": "search", "q": text},
        )
        return _parse_or_fail(self._parse_stations, data, "stations")

    async def search_trips(
        self,
        origin_id: str,
        destination_id: str,
        passenger_ids: Sequence[str],
        departure_date: str,
    ) -> list[Trip]:
        payload = self._build_search(
            origin_id, destination_id, passenger_ids, departure_date,
        )
        data = await self._request("POST", "search", payload=payload)
        trips = _parse_or_fail(self._parse_search, data, "search")
        logger.info(
            "검색 완료: %s → %s %s, %d개 여정",
            origin_id, destination_id, departure_date, len(trips),
        )
        return trips

    async def trips(self) -> list[BookedTrip]:
        data = await self._request("GET", self.TRIPS_PATH)
        return _parse_or_fail(self._parse_booked, data, self.TRIPS_PATH)

    async def basket(self) -> list[BookedTrip]:
        data = await self._request("GET", self.BASKET_PATH)
        return _parse_or_fail(self._parse_booked, data, self.BASKET_PATH)

    @staticmethod
    def _build_search(
        origin_id: str,
        destination_id: str,
        passenger_ids: Sequence[str],
        departure_date: str,
    ) -> dict[str, Any]:
        """검색 요청 본문 구성"""
        return {
            "search": {
                "departure_date": departure_date,
                "return_date": None,
                "cuis": {},
                "systems": ["sncf", "db", "idtgv", "ouigo", "trenitalia", "ntv"],
                "exchangeable_part": None,
                "source": None,
                "is_previous_available": False,
                "is_next_available": False,
                "departure_station_id": origin_id,
                "via_station_id": None,
                "arrival_station_id": destination_id,
                "exchangeable_pnr_id": None,
                "passenger_ids": list(passenger_ids),
                "card_ids": [],
            },
        }

    @staticmethod
    def _parse_stations(data: dict[str, Any]) -> list[Station]:
        return [
            Station(id=str(s["id"]), name=s.get("name", ""))
            for s in data.get("stations", [])
            if "id" in s
        ]

    @staticmethod
    def _parse_search(data: dict[str, Any]) -> list[Trip]:
        """정규화된 검색 응답 → Trip 목록 (응답 순서 유지)

        같은 출발/도착 시각과 같은 열차 구성을 가진 trip들은 하나의 여정으로
        묶고, 첫 구간의 travel_class를 등급 이름으로 쓴다.
        같은 등급이 여러 번 나오면 가장 싼 요금을 유지한다.
        """
        stations = _name_index(data.get("stations", []))
        segments = {str(s["id"]): s for s in data.get("segments", []) if "id" in s}

        grouped: dict[tuple[Any, ...], dict[str, Any]] = {}
        for raw in data.get("trips", []):
            raw_segments = [
                segments[str(sid)]
                for sid in raw.get("segment_ids", [])
                if str(sid) in segments
            ]
            if not raw_segments:
                logger.debug("구간 없는 trip 무시: %s", raw.get("id"))
                continue

            key = (
                raw.get("departure_date"),
                raw.get("arrival_date"),
                tuple(
                    (s.get("departure_date"), s.get("train_number") or s.get("train_name"))
                    for s in raw_segments
                ),
            )
            entry = grouped.get(key)
            if entry is None:
                entry = grouped[key] = {"raw": raw, "segments": raw_segments, "classes": {}}

            travel_class = raw_segments[0].get("travel_class") or DEFAULT_TRAVEL_CLASS
            fare = FareOption(
                cents=int(raw.get("cents", 0)),
                currency=raw.get("currency", ""),
                trip_id=str(raw["id"]),
            )
            current = entry["classes"].get(travel_class)
            if current is None or fare.cents < current.cents:
                entry["classes"][travel_class] = fare

        trips: list[Trip] = []
        for entry in grouped.values():
            raw = entry["raw"]
            trips.append(Trip(
                departure_station=stations.get(str(raw.get("departure_station_id")), ""),
                arrival_station=stations.get(str(raw.get("arrival_station_id")), ""),
                departure_date=_parse_datetime(raw["departure_date"]),
                arrival_date=_parse_datetime(raw["arrival_date"]),
                segments=tuple(_to_segment(s, stations) for s in entry["segments"]),
                travel_classes=entry["classes"],
            ))
        return trips

    @staticmethod
    def _parse_booked(data: dict[str, Any]) -> list[BookedTrip]:
        """예약 목록 응답 → BookedTrip 목록"""
        stations = {
            str(s["id"]): Station(id=str(s["id"]), name=s.get("name", ""))
            for s in data.get("stations", [])
            if "id" in s
        }
        passengers = {str(p["id"]): p for p in data.get("passengers", []) if "id" in p}
        pnrs = {str(p["id"]): p for p in data.get("pnrs", []) if "id" in p}

        result: list[BookedTrip] = []
        for raw in data.get("trips", []):
            dep_id = str(raw.get("departure_station_id"))
            arr_id = str(raw.get("arrival_station_id"))
            pnr = pnrs.get(str(raw.get("pnr_id")), {})
            passenger = passengers.get(str(raw.get("passenger_id")), {})
            result.append(BookedTrip(
                reference=pnr.get("code", ""),
                departure_date=_parse_datetime(raw["departure_date"]),
                arrival_date=_parse_datetime(raw["arrival_date"]),
                departure_station=stations.get(dep_id, Station(dep_id, "")),
                arrival_station=stations.get(arr_id, Station(arr_id, "")),
                passenger_first_name=passenger.get("first_name", ""),
                cents=int(raw.get("cents", 0)),
                currency=raw.get("currency", ""),
            ))
        return result


def _name_index(stations: list[dict[str, Any]]) -> dict[str, str]:
    return {str(s["id"]): s.get("name", "") for s in stations if "id" in s}


def _parse_datetime(value: str) -> datetime:
    """ISO 8601 문자열 → datetime ('Z' 접미사 허용)"""
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    return datetime.fromisoformat(value)


def _to_segment(raw: dict[str, Any], stations: dict[str, str]) -> Segment:
    return Segment(
        departure_station=stations.get(str(raw.get("departure_station_id")), ""),
        arrival_station=stations.get(str(raw.get("arrival_station_id")), ""),
        departure_date=_parse_datetime(raw["departure_date"]),
        arrival_date=_parse_datetime(raw["arrival_date"]),
        train_name=raw.get("train_name", ""),
    )


def _parse_or_fail(
    parser: Callable[[dict[str, Any]], list[T]],
    data: dict[str, Any],
    what: str,
) -> list[T]:
    """필드 누락/형식 오류 → ServiceUnavailable"""
    try:
        return parser(data)
    except (KeyError, ValueError, TypeError, AttributeError) as e:
        logger.warning("%s 응답 해석 실패: %r", what, e)
        raise ServiceUnavailable(f"Unexpected response for {what}") from e
