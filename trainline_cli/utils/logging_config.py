"""로깅 설정

진단 로그는 stderr로 보내 대화형 프롬프트(stdout)와 섞이지 않게 한다.
터미널일 때만 레벨 색상을 입히고, --log-file 이 있으면 파일에도 남긴다.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import TextIO

from trainline_cli.utils.render import color_enabled, style

_LEVEL_STYLES = {
    "DEBUG": ("cyan",),
    "INFO": ("green",),
    "WARNING": ("yellow",),
    "ERROR": ("red",),
    "CRITICAL": ("red", "bold"),
}

# 요청마다 디버그 로그를 쏟아내는 라이브러리
_NOISY_LOGGERS = ("aiohttp", "asyncio")

CONSOLE_FORMAT = "%(levelname)s %(name)s │ %(message)s"
FILE_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


class ColorFormatter(logging.Formatter):
    """레벨 이름에 색을 입히는 포매터 (원본 레코드는 건드리지 않음)"""

    def format(self, record: logging.LogRecord) -> str:
        styles = _LEVEL_STYLES.get(record.levelname)
        if not styles:
            return super().format(record)
        colored = logging.makeLogRecord(record.__dict__)
        colored.levelname = style(f"{record.levelname:<8}", *styles, enabled=True)
        return super().format(colored)


def setup_logging(
    level: str = "WARNING",
    log_file: str | Path | None = None,
    stream: TextIO | None = None,
) -> None:
    """루트 로거 초기화. 여러 번 호출해도 핸들러가 중복되지 않는다."""
    stream = stream or sys.stderr
    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.WARNING))
    root.handlers.clear()

    console = logging.StreamHandler(stream)
    formatter_cls = ColorFormatter if color_enabled(stream) else logging.Formatter
    console.setFormatter(formatter_cls(CONSOLE_FORMAT))
    root.addHandler(console)

    if log_file:
        path = Path(log_file).expanduser()
        path.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(path, encoding="utf-8")
        handler.setFormatter(logging.Formatter(FILE_FORMAT, "%Y-%m-%d %H:%M:%S"))
        root.addHandler(handler)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
