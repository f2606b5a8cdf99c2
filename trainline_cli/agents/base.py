"""에이전트 공통 골격

CLI 한 번 실행 = 에이전트 한 번 실행.
준비(setup) → 실행(run) → 정리(teardown) 순서를 강제한다.

상태: IDLE → PREPARED → RUNNING → CLOSING → CLOSED
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from enum import Enum, auto

from trainline_cli.models.errors import TrainlineError


class AgentLifecycle(Enum):
    IDLE = auto()
    PREPARED = auto()
    RUNNING = auto()
    CLOSING = auto()
    CLOSED = auto()


class BaseAgent(ABC):
    """setup / run / teardown 을 구현하는 에이전트의 기반 클래스

    teardown은 run이 예외로 끝나도 항상 호출된다.
    """

    def __init__(self, agent_id: str) -> None:
        self._id = agent_id
        self._lifecycle = AgentLifecycle.IDLE
        self._logger = logging.getLogger(f"trainline.agent.{agent_id}")

    @property
    def agent_id(self) -> str:
        return self._id

    @property
    def lifecycle(self) -> AgentLifecycle:
        return self._lifecycle

    def _enter(self, state: AgentLifecycle) -> None:
        self._logger.debug("%s: %s → %s", self._id, self._lifecycle.name, state.name)
        self._lifecycle = state

    @abstractmethod
    async def setup(self) -> None:
        ...

    @abstractmethod
    async def run(self) -> None:
        ...

    @abstractmethod
    async def teardown(self) -> None:
        ...

    async def start(self) -> None:
        """setup → run → teardown. run의 예외는 기록 후 그대로 전파."""
        self._enter(AgentLifecycle.IDLE)
        try:
            await self.setup()
            self._enter(AgentLifecycle.PREPARED)
            self._enter(AgentLifecycle.RUNNING)
            await self.run()
        except TrainlineError as e:
            self._logger.error("%s 실행 오류: %s", self._id, e)
            raise
        except Exception:
            self._logger.exception("%s 실행 중 예기치 않은 오류", self._id)
            raise
        finally:
            self._enter(AgentLifecycle.CLOSING)
            await self.teardown()
            self._enter(AgentLifecycle.CLOSED)
