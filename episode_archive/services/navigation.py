"""Address bar abstraction used to persist and restore searches."""

from __future__ import annotations

from typing import Protocol


class Navigator(Protocol):
    def current_query_string(self) -> str: ...

    def push(self, query_string: str) -> None: ...


class MemoryNavigator:
    """In-process history of pushed query strings."""

    def __init__(self, initial: str = "") -> None:
        self.history: list[str] = [initial.lstrip("?")]

    def current_query_string(self) -> str:
        return self.history[-1]

    def push(self, query_string: str) -> None:
        self.history.append(query_string.lstrip("?"))

    @property
    def location(self) -> str:
        current = self.current_query_string()
        return f"?{current}" if current else ""


__all__ = ["MemoryNavigator", "Navigator"]
