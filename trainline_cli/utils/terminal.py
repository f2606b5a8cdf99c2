"""터미널 대화형 입력

input() 기반 Prompter 구현 (input()은 작업 스레드에서 실행).
자동완성은 입력 → 제안 목록 → 번호 선택 / 다시 입력 순으로 좁혀 간다.
Ctrl+C / EOF 는 PromptAborted 로 변환한다.
"""

from __future__ import annotations

import asyncio
import threading
from collections.abc import Callable, Sequence
from typing import Optional, TypeVar

from trainline_cli.models.errors import PromptAborted
from trainline_cli.skills.base import Choice, Prompter, SuggestionSource
from trainline_cli.utils.render import style

T = TypeVar("T")


def _indent(text: str, prefix: str) -> str:
    first, *rest = text.split("\n")
    pad = " " * len(prefix)
    return "\n".join([prefix + first, *(pad + line for line in rest)])


class TerminalPrompter(Prompter):
    """표준 입출력 프롬프트"""

    __slots__ = ("_input", "_print")

    def __init__(
        self,
        input_func: Callable[[str], str] = input,
        print_func: Callable[[str], None] = print,
    ) -> None:
        self._input = input_func
        self._print = print_func

    async def _ask(self, message: str) -> str:
        """input()을 작업 스레드에서 실행. 기다리는 동안 이벤트 루프는 계속 돈다."""
        loop = asyncio.get_running_loop()
        answer: asyncio.Future[str] = loop.create_future()

        def settle(line: Optional[str], error: Optional[BaseException]) -> None:
            if answer.done():
                return
            if error is not None:
                answer.set_exception(error)
            else:
                answer.set_result(line or "")

        def deliver(line: Optional[str], error: Optional[BaseException]) -> None:
            # 응답 전에 루프가 끝났으면 전달할 곳이 없다
            if not loop.is_closed():
                loop.call_soon_threadsafe(settle, line, error)

        def read() -> None:
            try:
                line = self._input(message)
            except (EOFError, KeyboardInterrupt) as e:
                aborted = PromptAborted("Prompt aborted by user")
                aborted.__cause__ = e
                deliver(None, aborted)
            except Exception as e:
                deliver(None, e)
            else:
                deliver(line, None)

        # 데몬 스레드: 종료 시 대기 중인 input()을 기다리지 않는다
        threading.Thread(target=read, name="prompt-input", daemon=True).start()
        try:
            return (await answer).strip()
        except PromptAborted:
            self._print("")
            raise

    def notify(self, message: str) -> None:
        self._print(style(f"  {message}", "yellow"))

    async def autocomplete(
        self,
        message: str,
        source: SuggestionSource,
        page_size: int = 5,
        highlight: Optional[Callable[[str], str]] = None,
    ) -> str:
        shown: list[str] = []
        text = ""
        while True:
            suggestions = await source(text)
            if suggestions is not None:
                shown = suggestions[:page_size]

            if shown:
                for i, name in enumerate(shown, 1):
                    label = highlight(name) if highlight else name
                    self._print(f"    {i}) {label}")
            else:
                self._print("    (no suggestion, type to search)")

            answer = await self._ask(f"  {message} ")
            if not answer:
                if shown:
                    return shown[0]
                continue
            if answer.isdigit() and 1 <= int(answer) <= len(shown):
                return shown[int(answer) - 1]
            exact = [s for s in shown if s.casefold() == answer.casefold()]
            if exact:
                return exact[0]
            text = answer

    async def select(self, message: str, choices: Sequence[Choice[T]]) -> T:
        if not choices:
            raise ValueError("select() needs at least one choice")
        self._print(f"  {message}")
        for i, choice in enumerate(choices, 1):
            self._print(_indent(choice.name, f"  {i:>2}) "))
        while True:
            answer = await self._ask(f"  Choice [1-{len(choices)}]: ")
            if answer.isdigit() and 1 <= int(answer) <= len(choices):
                choice = choices[int(answer) - 1]
                if choice.short:
                    self._print(f"  > {choice.short}")
                return choice.value
            self.notify(f"Please enter a number between 1 and {len(choices)}")

    async def checkbox(self, message: str, choices: Sequence[Choice[T]]) -> list[T]:
        checked = [c.checked for c in choices]
        while True:
            self._print(f"  {message}")
            for i, choice in enumerate(choices, 1):
                mark = "x" if checked[i - 1] else " "
                self._print(f"   [{mark}] {i}) {choice.name}")
            answer = await self._ask("  Toggle numbers (e.g. 1,3), Enter to confirm: ")
            if not answer:
                return [c.value for c, on in zip(choices, checked) if on]
            for token in answer.replace(" ", ",").split(","):
                if token.isdigit() and 1 <= int(token) <= len(choices):
                    checked[int(token) - 1] = not checked[int(token) - 1]
                elif token:
                    self.notify(f"Ignoring '{token}'")
