"""계정 에이전트 (AccountAgent)

로그인 / 로그아웃 / 예약 목록 / 장바구니 조회를 처리한다.
실행 루프가 없는 요청-응답 방식이므로 BaseAgent 라이프사이클을 쓰지 않고,
CLI가 끝날 때 close()로 HTTP 세션만 정리한다.
"""

from __future__ import annotations

import logging
from typing import Optional

from trainline_cli.models.session import Session
from trainline_cli.models.trip import BookedTrip
from trainline_cli.skills.base import BookingService
from trainline_cli.skills.credential_store import CredentialStore

logger = logging.getLogger("trainline.agent.account")


class AccountAgent:
    """계정 관련 요청 처리"""

    def __init__(self, service: BookingService, store: CredentialStore) -> None:
        self._service = service
        self._store = store

    async def close(self) -> None:
        await self._service.close()
        logger.debug("AccountAgent 정리 완료")

    def current_session(self) -> Optional[Session]:
        return self._store.load()

    async def login(self, email: str, password: str) -> Session:
        """로그인 후 응답 저장. 실패 시 AuthenticationError / ServiceUnavailable."""
        payload = await self._service.signin(email, password)
        session = Session.from_payload(payload)
        self._store.save(payload)
        logger.info("로그인 완료: %s", session.display_name)
        return session

    def logout(self) -> bool:
        removed = self._store.clear()
        logger.info("로그아웃 (%s)", "삭제됨" if removed else "저장된 정보 없음")
        return removed

    async def list_trips(self, limit: Optional[int] = None) -> list[BookedTrip]:
        trips = await self._service.trips()
        return trips[:limit] if limit is not None else trips

    async def list_basket(self) -> list[BookedTrip]:
        return await self._service.basket()
