"""인증된 사용자 세션

로그인 응답(payload)을 그대로 저장하고, 필요한 필드만 불변 객체로 노출한다.
오케스트레이터는 생성 시점에 Session을 명시적으로 전달받는다.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from trainline_cli.models.trip import Passenger, Station


@dataclass(frozen=True, slots=True)
class Session:
    """로그인 세션 (토큰 + 사용자 프로필)"""

    token: str
    first_name: str
    last_name: str
    email: str = ""
    stations: tuple[Station, ...] = field(default_factory=tuple)
    passengers: tuple[Passenger, ...] = field(default_factory=tuple)

    @property
    def display_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> Session:
        """로그인 응답 dict → Session. 토큰이 없으면 ValueError."""
        meta = payload.get("meta") or {}
        token = meta.get("token")
        if not token:
            raise ValueError("Session payload has no token")

        user = payload.get("user") or {}
        stations = tuple(
            Station(id=str(s["id"]), name=s.get("name", ""))
            for s in payload.get("stations") or []
            if "id" in s
        )
        passengers = tuple(
            Passenger(
                id=str(p["id"]),
                first_name=p.get("first_name", ""),
                last_name=p.get("last_name", ""),
                is_selected=bool(p.get("is_selected", False)),
            )
            for p in payload.get("passengers") or []
            if "id" in p
        )
        return cls(
            token=token,
            first_name=user.get("first_name", ""),
            last_name=user.get("last_name", ""),
            email=user.get("email", ""),
            stations=stations,
            passengers=passengers,
        )
