from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, Mapping

from blinker import Signal

EVENT_MOVE = "move"                    # payload: dx=int
EVENT_ROTATE = "rotate"                # payload: kick=(dx, dy)
EVENT_DROP = "drop"                    # payload: rows=int, hard=bool
EVENT_HOLD = "hold"                    # payload: swapped=bool
EVENT_LOCK = "lock"                    # payload: piece=Piece
EVENT_LINES_CLEARED = "lines_cleared"  # payload: count=int
EVENT_LEVEL_UP = "level_up"            # payload: level=int
EVENT_GAME_OVER = "game_over"          # payload: score=int
EVENT_PAUSED = "paused"
EVENT_RESUMED = "resumed"
EVENT_RESET = "reset"

ALL_EVENTS = (
    EVENT_MOVE,
    EVENT_ROTATE,
    EVENT_DROP,
    EVENT_HOLD,
    EVENT_LOCK,
    EVENT_LINES_CLEARED,
    EVENT_LEVEL_UP,
    EVENT_GAME_OVER,
    EVENT_PAUSED,
    EVENT_RESUMED,
    EVENT_RESET,
)


@dataclass(frozen=True)
class GameEvent:
    name: str
    payload: Mapping[str, Any] = field(default_factory=dict)

    def __getitem__(self, key: str) -> Any:
        return self.payload[key]


class EventBus:
    """Named notification channels backed by blinker signals."""

    def __init__(self) -> None:
        self._signals: Dict[str, Signal] = {}

    def subscribe(self, name: str, fn: Callable[..., Any]) -> None:
        sig = self._signals.setdefault(name, Signal(name))
        # Strong references so lambdas and bound methods of short-lived objects stay connected.
        sig.connect(fn, weak=False)

    def unsubscribe(self, name: str, fn: Callable[..., Any]) -> None:
        sig = self._signals.get(name)
        if sig:
            sig.disconnect(fn)

    def emit(self, name: str, **payload: Any) -> None:
        sig = self._signals.get(name)
        if sig:
            sig.send(self, **payload)

    def publish(self, events: Iterable[GameEvent]) -> None:
        for event in events:
            self.emit(event.name, **event.payload)
