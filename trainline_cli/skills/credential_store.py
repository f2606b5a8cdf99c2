"""로그인 정보 저장소

로그인 응답 payload를 JSON 파일 하나에 보관한다.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Optional

from trainline_cli.models.session import Session

logger = logging.getLogger("trainline.skill.credentials")


class CredentialStore:
    """JSON 파일 기반 세션 저장소"""

    __slots__ = ("_path",)

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def load_payload(self) -> Optional[dict[str, Any]]:
        if not self._path.exists():
            return None
        try:
            with self._path.open("r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("저장된 로그인 정보를 읽을 수 없습니다 (%s): %s", self._path, e)
            return None
        return data if isinstance(data, dict) else None

    def load(self) -> Optional[Session]:
        """저장된 세션. 없거나 토큰이 없으면 None."""
        payload = self.load_payload()
        if payload is None:
            return None
        try:
            return Session.from_payload(payload)
        except (ValueError, KeyError, TypeError) as e:
            logger.warning("저장된 로그인 정보가 올바르지 않습니다: %s", e)
            return None

    def save(self, payload: dict[str, Any]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        with self._path.open("w", encoding="utf-8") as f:
            json.dump(payload, f, ensure_ascii=False, indent=2)
        logger.debug("로그인 정보 저장: %s", self._path)

    def clear(self) -> bool:
        """저장된 정보 삭제. 삭제한 파일이 있었으면 True."""
        if not self._path.exists():
            return False
        self._path.unlink()
        return True
