"""Operator input providers: interactive console or scripted answers."""

import re
from abc import ABC, abstractmethod
from collections import deque
from typing import Any, Deque, Dict, Optional

from rich.console import Console
from rich.markup import escape
from rich.prompt import Prompt

from cactiinstaller.errors import InstallerError

YES_PATTERN = re.compile(r"^[Yy]$")


class Prompter(ABC):
    """Answers the installer's questions. Keys name the decision being made."""

    @abstractmethod
    def ask(self, key: str, message: str, default: Optional[str] = None) -> str:
        raise NotImplementedError

    @abstractmethod
    def confirm(self, key: str, message: str, default: bool = False) -> bool:
        raise NotImplementedError


class ConsolePrompter(Prompter):
    def __init__(self, console: Console):
        self.console = console

    def ask(self, key: str, message: str, default: Optional[str] = None) -> str:
        answer = Prompt.ask(
            message,
            console=self.console,
            default=default or "",
            show_default=bool(default),
        )
        return answer.strip()

    def confirm(self, key: str, message: str, default: bool = False) -> bool:
        """Reads one answer. Only `y` or `Y` confirms; anything else declines."""
        hint = "[Y/n]" if default else "[y/N]"
        answer = Prompt.ask(
            f"{message} {escape(hint)}",
            console=self.console,
            default="y" if default else "",
            show_default=False,
        )
        return bool(YES_PATTERN.match(answer.strip()))

class ScriptedPrompter(Prompter):
    """Replays preset answers per key, then defers to a fallback prompter.

    Without a fallback, running out of answers for a key is an error so that
    unattended runs never block on input.
    """

    def __init__(self, answers: Optional[Dict[str, Any]] = None, fallback: Optional[Prompter] = None):
        self.answers: Dict[str, Deque[str]] = {}
        self.fallback = fallback
        for key, value in (answers or {}).items():
            if value is None:
                continue
            values = value if isinstance(value, (list, tuple)) else [value]
            self.answers[key] = deque(self._as_text(item) for item in values)

    @staticmethod
    def _as_text(value: Any) -> str:
        if isinstance(value, bool):
            return "y" if value else "n"
        return str(value)

    def _next(self, key: str, message: str) -> Optional[str]:
        queue = self.answers.get(key)
        if queue:
            return queue.popleft()
        if self.fallback is None:
            raise InstallerError(f"No answer provided for prompt '{key}': {message}")
        return None

    def ask(self, key: str, message: str, default: Optional[str] = None) -> str:
        answer = self._next(key, message)
        if answer is None:
            return self.fallback.ask(key, message, default=default)
        return answer.strip()

    def confirm(self, key: str, message: str, default: bool = False) -> bool:
        answer = self._next(key, message)
        if answer is None:
            return self.fallback.confirm(key, message, default=default)
        return bool(YES_PATTERN.match(answer.strip()))
