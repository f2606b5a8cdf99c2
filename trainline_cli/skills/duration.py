"""소요 시간 포매터

밀리초 → '1h05' / '12 min' 형식 문자열.
"""

from __future__ import annotations

import math


def format_duration(duration_ms: int) -> str:
    """밀리초 단위 소요 시간을 사람이 읽는 형식으로 변환.

    1시간 이상은 '{시}h{분:02}', 미만은 '{분} min'. 분은 올림한다.
    """
    seconds = duration_ms / 1000
    remainder = seconds % 3600
    minutes = math.ceil(remainder / 60) if remainder else 0

    if seconds >= 3600:
        return f"{int(seconds // 3600)}h{minutes:02d}"
    return f"{minutes} min"
