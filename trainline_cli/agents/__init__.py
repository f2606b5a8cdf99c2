"""에이전트 패키지

  TripResolutionOrchestrator - 검색 워크플로 (역 → 날짜 → 승객 → 여정 → 등급)
  AccountAgent               - 로그인 / 로그아웃 / 예약 목록
"""

from trainline_cli.agents.base import BaseAgent, AgentLifecycle
from trainline_cli.agents.orchestrator import TripResolutionOrchestrator
from trainline_cli.agents.account_agent import AccountAgent

__all__ = [
    "BaseAgent",
    "AgentLifecycle",
    "TripResolutionOrchestrator",
    "AccountAgent",
]
