"""터미널 출력 포맷

여정 선택 블록, 예약 목록 표, 날짜 라벨 강조를 만든다.
"""

from __future__ import annotations

import os
import sys
from collections.abc import Sequence
from datetime import datetime, timedelta
from typing import Optional, TextIO

from trainline_cli.models.trip import BookedTrip, Trip, format_price
from trainline_cli.skills.dates import DateCandidate
from trainline_cli.skills.duration import format_duration
from trainline_cli.skills.itinerary import headline, summarize_fare

# ANSI 스타일 코드
_STYLES = {
    "bold": "\033[1m",
    "green": "\033[32m",
    "red": "\033[31m",
    "yellow": "\033[33m",
    "blue": "\033[34m",
    "cyan": "\033[36m",
    "reset": "\033[0m",
}

_LEFT_WIDTH = 20


def color_enabled(stream: Optional[TextIO] = None) -> bool:
    """NO_COLOR 가 없고 출력이 터미널일 때만 색상 사용 (기본: stdout)"""
    if os.environ.get("NO_COLOR"):
        return False
    stream = stream or sys.stdout
    isatty = getattr(stream, "isatty", None)
    return bool(isatty and isatty())


def style(text: str, *names: str, enabled: Optional[bool] = None) -> str:
    """ANSI 스타일 적용. enabled=None 이면 stdout 기준으로 판단."""
    prefix = "".join(_STYLES[n] for n in names)
    if not prefix:
        return text
    if enabled is None:
        enabled = color_enabled()
    if not enabled:
        return text
    return f"{prefix}{text}{_STYLES['reset']}"


def style_date(candidate: DateCandidate) -> str:
    """주말은 초록, 오늘/내일은 굵게"""
    names: list[str] = []
    if candidate.is_weekend:
        names.append("green")
    if candidate.is_near:
        names.append("bold")
    return style(candidate.label, *names)


def fare_text(trip: Trip) -> str:
    """'45 / 89 EUR' (1등석 요금이 있을 때)"""
    fare = summarize_fare(trip)
    price = format_price(fare.primary.cents)
    if fare.secondary is not None:
        price += f" / {format_price(fare.secondary.cents)}"
    return f"{price} {fare.primary.currency}"


def itinerary_block(trip: Trip) -> str:
    """여정 선택지 한 개 (소요 시간/출발, 경유지, 요금/도착)"""
    head = headline(trip)
    lines = [
        f"{head.duration:<{_LEFT_WIDTH}}{head.departure_time}  {trip.departure_station}",
    ]
    for stop in trip.stops:
        lines.append(
            f"{'':<{_LEFT_WIDTH}}      {format_duration(stop.duration)}  {stop.station}"
        )
    lines.append(
        f"{'  ' + fare_text(trip):<{_LEFT_WIDTH}}  {head.arrival_time}  {trip.arrival_station}"
    )
    return "\n".join(lines)


def calendar(moment: datetime, now: Optional[datetime] = None) -> str:
    """'Today 14:30' / 'Tomorrow 09:00' / 'Yesterday 18:00' / '05/01/2026 14:30'"""
    now = now or datetime.now(moment.tzinfo)
    delta = (moment.date() - now.date()).days
    names = {0: "Today", 1: "Tomorrow", -1: "Yesterday"}
    if delta in names:
        return f"{names[delta]} {moment:%H:%M}"
    return f"{moment:%d/%m/%Y %H:%M}"


def trips_to_table(trips: Sequence[BookedTrip], now: Optional[datetime] = None) -> str:
    """예약 목록 표: 예약번호 / 일시 / 역 / 승객 / 금액"""
    if not trips:
        return "(empty)"

    rows: list[list[list[str]]] = []
    for trip in trips:
        departure = calendar(trip.departure_date, now)
        arrival = calendar(trip.arrival_date, now)
        dates = [departure] if departure == arrival else [departure, arrival]
        rows.append([
            [trip.reference],
            dates,
            [trip.departure_station.name, trip.arrival_station.name],
            [trip.passenger_first_name],
            [f"{format_price(trip.cents)} {trip.currency}"],
        ])

    widths = [
        max(len(line) for row in rows for line in row[col])
        for col in range(5)
    ]
    border = "+" + "+".join("-" * (w + 1) for w in widths) + "+"

    out = [border]
    for row in rows:
        height = max(len(cell) for cell in row)
        for i in range(height):
            cells = []
            for col, cell in enumerate(row):
                text = cell[i] if i < len(cell) else ""
                if col == 4:
                    cells.append(f"{text:>{widths[col]}} ")
                else:
                    cells.append(f"{text:<{widths[col]}} ")
            out.append("|" + "|".join(cells) + "|")
        out.append(border)
    return "\n".join(out)
