"""출발 날짜 후보 생성 및 해석

오늘부터 연속된 N일의 라벨('Monday, January 5')을 만들고,
선택된 라벨 + 시간대('14h')를 구체적인 datetime으로 변환한다.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Optional

from trainline_cli.models.errors import InvalidDate


@dataclass(frozen=True, slots=True)
class DateCandidate:
    """날짜 후보 (is_weekend / is_near는 표시용 힌트)"""

    label: str
    date: date
    is_weekend: bool
    is_near: bool


def format_label(d: date) -> str:
    """date → 'Monday, January 5' (연도 없음, 일자 0 패딩 없음)"""
    return f"{d:%A}, {d:%B} {d.day}"


def next_days(limit: int, today: Optional[date] = None) -> list[DateCandidate]:
    """오늘부터 limit일의 날짜 후보. 호출할 때마다 현재 날짜 기준으로 새로 생성."""
    current = today or date.today()
    days: list[DateCandidate] = []
    for i in range(limit):
        days.append(DateCandidate(
            label=format_label(current),
            date=current,
            is_weekend=current.isoweekday() >= 6,
            is_near=i <= 1,
        ))
        current += timedelta(days=1)
    return days


def parse_hour(hour_label: str) -> int:
    """'14h' → 14"""
    text = hour_label.strip().lower()
    if not text.endswith("h") or not text[:-1].isdigit():
        raise InvalidDate(f"Invalid time slot: '{hour_label}'")
    hour = int(text[:-1])
    if hour > 23:
        raise InvalidDate(f"Invalid time slot: '{hour_label}'")
    return hour


def parse_departure(
    label: str,
    hour_label: str,
    today: Optional[date] = None,
) -> datetime:
    """날짜 라벨 + 시간대 → 분 단위 없는 datetime.

    연도는 올해로 해석하고, 이미 지난 날짜면 다음 해로 넘긴다
    (90일 창이 연말을 넘는 경우). 라벨의 요일이 실제 요일과 다르면 InvalidDate.
    """
    today = today or date.today()
    hour = parse_hour(hour_label)

    text = " ".join(label.split())
    try:
        weekday_name, _, month_day = text.partition(", ")
        parsed = datetime.strptime(f"{month_day} 2000", "%B %d %Y")
    except ValueError as e:
        raise InvalidDate(f"Invalid date: '{label}'") from e

    for year in (today.year, today.year + 1):
        try:
            candidate = date(year, parsed.month, parsed.day)
        except ValueError:
            # 2월 29일
            continue
        if candidate < today:
            continue
        if f"{candidate:%A}".lower() != weekday_name.lower():
            raise InvalidDate(
                f"'{label}' is not a {weekday_name} in {candidate.year}"
            )
        return datetime(candidate.year, candidate.month, candidate.day, hour)

    raise InvalidDate(f"Invalid date: '{label}'")
