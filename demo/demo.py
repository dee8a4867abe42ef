#!/usr/bin/env python3
"""
Demonstration of mortar.inject.

This demo shows:
1. Binding instances under interfaces
2. Field and method injection
3. Optional dependencies across bind and unbind
4. Lazy services discovered from a module
5. Invoking methods with mixed explicit and injected arguments
6. Update broadcast
"""

import logging
import sys
from abc import ABC, abstractmethod
from typing import Annotated

from mortar.inject import Container, Inject, InjectOptional, find_services, inject, service

# Example domain: a tiny game loop with a clock, a score board and a renderer


class Clock(ABC):
    """Abstract game clock."""

    @abstractmethod
    def ticks(self) -> int:
        pass


class ScoreBoard(ABC):
    """Abstract score keeping."""

    @abstractmethod
    def add(self, points: int) -> int:
        pass


class Renderer(ABC):
    """Abstract output."""

    @abstractmethod
    def draw(self, text: str) -> str:
        pass


class TickClock(Clock):
    """Clock advanced once per update."""

    def __init__(self):
        self._ticks = 0

    def ticks(self) -> int:
        return self._ticks

    def on_update(self) -> None:
        self._ticks += 1


@service(ScoreBoard)
class InMemoryScoreBoard(ScoreBoard):
    """Score board created lazily on first use."""

    def __init__(self):
        self.total = 0

    def add(self, points: int) -> int:
        self.total += points
        return self.total


@service()
def console_renderer() -> Renderer:
    return ConsoleRenderer()


class ConsoleRenderer(Renderer):
    def draw(self, text: str) -> str:
        line = f"[screen] {text}"
        print(line)
        return line


class Player:
    """A game object declaring its dependencies."""

    clock: Annotated[Clock, Inject()]
    renderer: Annotated[Renderer | None, InjectOptional()] = None

    def __init__(self, name: str):
        self.name = name
        self.score_board: ScoreBoard | None = None

    @inject
    def attach(self, score_board: ScoreBoard) -> None:
        self.score_board = score_board

    def score(self, points: int, bonus: int, clock: Clock, renderer: Renderer) -> int:
        assert self.score_board is not None
        total = self.score_board.add(points + bonus)
        renderer.draw(f"{self.name} scored {points}+{bonus} at tick {clock.ticks()}, total {total}")
        return total


def main() -> None:
    logging.basicConfig(level=logging.DEBUG if "-v" in sys.argv else logging.WARNING)

    print("=== mortar.inject demo ===\n")

    container = Container()
    container.bind(Clock, TickClock())
    container.bind_lazy_from_registry(find_services(sys.modules[__name__]))

    print("1. Injecting a player")
    player = container.inject(Player("ada"))
    print(f"   clock: {type(player.clock).__name__}")
    print(f"   renderer (optional, lazy): {type(player.renderer).__name__}")
    print(f"   score board (method injected): {type(player.score_board).__name__}")

    print("\n2. Update broadcast")
    for _ in range(3):
        container.on_update()
    print(f"   ticks after three updates: {player.clock.ticks()}")

    print("\n3. Invoking with explicit and injected arguments")
    total = container.invoke(player, "score", 10, 5)
    print(f"   total: {total}")

    print("\n4. Unbinding an optional dependency")
    container.unbind(Renderer)
    container.inject(player)
    print(f"   renderer after unbind: {player.renderer}")

    print("\n✅ Demo completed")


if __name__ == "__main__":
    main()
