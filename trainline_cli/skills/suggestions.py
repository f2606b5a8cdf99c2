"""자동완성 제안 순서 보장

입력 필드마다 단조 증가하는 요청 번호를 발급하고,
가장 최근 요청의 결과만 반영한다 (마지막 입력 우선).
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from typing import Generic, Optional, TypeVar

logger = logging.getLogger("trainline.skill.suggestions")

T = TypeVar("T")


class LatestOnly(Generic[T]):
    """필드 하나에 대한 요청 순서 추적기"""

    __slots__ = ("_field", "_issued")

    def __init__(self, field: str) -> None:
        self._field = field
        self._issued = 0

    @property
    def latest(self) -> int:
        return self._issued

    def issue(self) -> int:
        """새 요청 번호 발급"""
        self._issued += 1
        return self._issued

    def is_current(self, seq: int) -> bool:
        return seq == self._issued

    async def run(self, fetch: Callable[[], Awaitable[T]]) -> Optional[T]:
        """fetch 실행. 완료 시점에 더 새로운 요청이 있으면 None (결과 폐기)."""
        seq = self.issue()
        result = await fetch()
        if not self.is_current(seq):
            logger.debug(
                "%s: 오래된 제안 폐기 (#%d, 최신 #%d)",
                self._field, seq, self._issued,
            )
            return None
        return result
