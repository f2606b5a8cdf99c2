"""퍼지 매칭 스킬

입력 문자가 후보 문자열 안에 순서대로(부분 수열) 나타나면 일치로 본다.
대소문자 무시, 원래 순서 유지.
"""

from __future__ import annotations

from collections.abc import Iterable


def is_subsequence(query: str, candidate: str) -> bool:
    """query의 모든 문자가 candidate에 순서대로 등장하는지 검사"""
    it = iter(candidate.casefold())
    return all(ch in it for ch in query.casefold())


def fuzzy_filter(query: str, candidates: Iterable[str]) -> list[str]:
    """후보 목록을 query로 필터링. 빈 query는 전체를 그대로 반환."""
    if not query:
        return list(candidates)
    return [c for c in candidates if is_subsequence(query, c)]
