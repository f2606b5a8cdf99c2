"""도메인 예외 정의

TrainlineError를 루트로 하는 예외 계층.
NotFound / InvalidDate / EmptySelection 은 같은 단계에서 재입력으로 복구하고,
ServiceUnavailable 은 사용자에게 보고 후 워크플로를 중단한다.
"""

from __future__ import annotations


class TrainlineError(Exception):
    """트레인라인 클라이언트 기본 예외"""


class NotFound(TrainlineError):
    """역/날짜 텍스트와 일치하는 항목 없음"""

    def __init__(self, text: str) -> None:
        super().__init__(f"No match found for '{text}'")
        self.text = text


class InvalidDate(TrainlineError):
    """날짜 라벨 + 시간대를 타임스탬프로 변환할 수 없음"""


class InvalidItinerary(TrainlineError):
    """구간 순서가 잘못되어 환승 대기 시간이 음수"""


class ServiceUnavailable(TrainlineError):
    """예약 서비스 전송 계층 오류"""


class AuthenticationError(TrainlineError):
    """이메일 또는 비밀번호 거부"""


class EmptySelection(TrainlineError):
    """승객이 한 명도 선택되지 않음"""

    def __init__(self) -> None:
        super().__init__("Please select at least one passenger")


class PromptAborted(TrainlineError):
    """사용자가 프롬프트에서 중단 (Ctrl+C / EOF)"""
