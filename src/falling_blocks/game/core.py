from __future__ import annotations

import logging
import random
from dataclasses import dataclass, replace
from enum import Enum, IntEnum
from typing import Any, Callable, Dict, List, Optional, Tuple

import numpy as np

from .collision import collides, drop_distance, try_rotate
from .errors import ConfigurationError
from .events import (
    EVENT_DROP,
    EVENT_GAME_OVER,
    EVENT_HOLD,
    EVENT_LEVEL_UP,
    EVENT_LINES_CLEARED,
    EVENT_LOCK,
    EVENT_MOVE,
    EVENT_PAUSED,
    EVENT_RESET,
    EVENT_RESUMED,
    EVENT_ROTATE,
    EventBus,
    GameEvent,
)
from .grid import Board
from .pieces import MAX_SHAPE_SIDE, Piece, PieceCatalog
from .rules import ScoringRules

logger = logging.getLogger(__name__)


class Action(IntEnum):
    LEFT = 0
    RIGHT = 1
    ROTATE = 2
    SOFT_DROP = 3
    HARD_DROP = 4
    HOLD = 5
    NONE = 6
    PAUSE = 7
    RESET = 8


class Phase(Enum):
    RUNNING = "running"
    PAUSED = "paused"
    GAME_OVER = "game_over"


@dataclass
class GameConfig:
    width: int = 10
    height: int = 20
    base_interval_ms: float = 800.0
    random_seed: Optional[int] = None
    # None centers each piece on the board; an int pins every spawn to that column.
    spawn_x: Optional[int] = None
    spawn_y: int = 0
    top_zone_rows: int = 2

    def __post_init__(self) -> None:
        if self.width < MAX_SHAPE_SIDE or self.height < MAX_SHAPE_SIDE:
            raise ConfigurationError(
                f"board must be at least {MAX_SHAPE_SIDE}x{MAX_SHAPE_SIDE}, got {self.height}x{self.width}"
            )
        if self.base_interval_ms <= 0:
            raise ConfigurationError("base_interval_ms must be positive")
        if self.spawn_x is not None and not 0 <= self.spawn_x < self.width:
            raise ConfigurationError(f"spawn_x {self.spawn_x} is outside the board")
        if not 0 <= self.top_zone_rows <= self.height:
            raise ConfigurationError(f"top_zone_rows {self.top_zone_rows} is outside the board")


@dataclass(frozen=True, eq=False)
class EngineState:
    """One immutable snapshot of a game session."""

    board: Board
    active: Piece
    next: Piece
    held: Optional[Piece] = None
    can_hold: bool = True
    score: int = 0
    level: int = 1
    lines_cleared: int = 0
    drop_interval_ms: float = 800.0
    drop_accumulator_ms: float = 0.0
    phase: Phase = Phase.RUNNING

    @property
    def is_running(self) -> bool:
        return self.phase is Phase.RUNNING

    @property
    def is_paused(self) -> bool:
        return self.phase is Phase.PAUSED

    @property
    def is_game_over(self) -> bool:
        return self.phase is Phase.GAME_OVER

    def snapshot(self) -> Dict[str, Any]:
        return {
            "board": self.board,
            "active": self.active,
            "next": self.next,
            "held": self.held,
            "score": self.score,
            "level": self.level,
            "lines_cleared": self.lines_cleared,
            "phase": self.phase,
        }

    def view(self) -> np.ndarray:
        """Board colors with the falling piece overlaid as negative color ids."""
        state = self.board.grid.copy()
        if not self.is_game_over:
            for x, y in self.active.cells():
                if self.board.is_inside(x, y):
                    state[y, x] = -self.active.color_id
        return state


Transition = Tuple[EngineState, List[GameEvent]]


class Engine:
    """State machine for a falling-block game.

    Every action takes the current :class:`EngineState` and returns the next
    state plus the events it produced. Actions that do not apply (wrong
    phase, blocked move, hold already used) return the same state object and
    no events.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        rules: Optional[ScoringRules] = None,
        catalog: Optional[PieceCatalog] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.config = config or GameConfig()
        self.rules = rules or ScoringRules()
        self.catalog = catalog or PieceCatalog()
        self.rng = rng if rng is not None else random.Random(self.config.random_seed)
        self._actions: Dict[Action, Callable[[EngineState], Transition]] = {
            Action.LEFT: self.move_left,
            Action.RIGHT: self.move_right,
            Action.ROTATE: self.rotate,
            Action.SOFT_DROP: self.soft_drop,
            Action.HARD_DROP: self.hard_drop,
            Action.HOLD: self.hold,
            Action.NONE: lambda state: (state, []),
            Action.PAUSE: self.toggle_pause,
            Action.RESET: self.reset,
        }

    def _draw(self) -> Piece:
        return self.catalog.random_piece(
            self.rng, self.config.width, spawn_x=self.config.spawn_x, spawn_y=self.config.spawn_y
        )

    def new_game(self) -> EngineState:
        return EngineState(
            board=Board.empty(self.config.height, self.config.width),
            active=self._draw(),
            next=self._draw(),
            drop_interval_ms=self.rules.drop_interval_ms(1, self.config.base_interval_ms),
        )

    def apply(self, state: EngineState, action: Action) -> Transition:
        try:
            handler = self._actions[Action(action)]
        except ValueError:
            raise ValueError(f"unknown action: {action!r}") from None
        return handler(state)

    # ------------------------------------------------------------------
    # Clock
    # ------------------------------------------------------------------
    def tick(self, state: EngineState, delta_ms: float) -> Transition:
        """Advance the drop timer; at most one gravity step per call."""
        if not state.is_running:
            return state, []
        accumulated = state.drop_accumulator_ms + max(float(delta_ms), 0.0)
        if accumulated <= state.drop_interval_ms:
            return replace(state, drop_accumulator_ms=accumulated), []
        # Overflow is discarded rather than carried into further steps.
        state = replace(state, drop_accumulator_ms=0.0)
        events: List[GameEvent] = []
        if not collides(state.board, state.active, 0, 1):
            return replace(state, active=state.active.moved(0, 1)), events
        return self._lock(state, events), events

    # ------------------------------------------------------------------
    # Player actions
    # ------------------------------------------------------------------
    def move_left(self, state: EngineState) -> Transition:
        return self._shift(state, -1)

    def move_right(self, state: EngineState) -> Transition:
        return self._shift(state, 1)

    def _shift(self, state: EngineState, dx: int) -> Transition:
        if not state.is_running or collides(state.board, state.active, dx, 0):
            return state, []
        return replace(state, active=state.active.moved(dx, 0)), [GameEvent(EVENT_MOVE, {"dx": dx})]

    def soft_drop(self, state: EngineState) -> Transition:
        if not state.is_running:
            return state, []
        if not collides(state.board, state.active, 0, 1):
            moved = replace(state, active=state.active.moved(0, 1))
            return moved, [GameEvent(EVENT_DROP, {"rows": 1, "hard": False})]
        events: List[GameEvent] = []
        return self._lock(state, events), events

    def hard_drop(self, state: EngineState) -> Transition:
        if not state.is_running:
            return state, []
        rows = drop_distance(state.board, state.active)
        state = replace(state, active=state.active.moved(0, rows))
        events = [GameEvent(EVENT_DROP, {"rows": rows, "hard": True})]
        return self._lock(state, events), events

    def rotate(self, state: EngineState) -> Transition:
        if not state.is_running:
            return state, []
        result = try_rotate(state.board, state.active)
        if result is None:
            return state, []
        rotated, kick = result
        return replace(state, active=rotated), [GameEvent(EVENT_ROTATE, {"kick": kick})]

    def hold(self, state: EngineState) -> Transition:
        if not state.is_running or not state.can_hold:
            return state, []
        width, spawn_y = self.config.width, self.config.spawn_y
        banked = state.active.respawned(width, spawn_y)
        if state.held is None:
            state = replace(state, held=banked, active=state.next, next=self._draw(), can_hold=False)
            swapped = False
        else:
            state = replace(state, held=banked, active=state.held.respawned(width, spawn_y), can_hold=False)
            swapped = True
        logger.debug("held %s (swapped=%s)", banked.kind.name, swapped)
        return state, [GameEvent(EVENT_HOLD, {"swapped": swapped})]

    def toggle_pause(self, state: EngineState) -> Transition:
        if state.is_running:
            logger.debug("paused with %.1f ms accumulated", state.drop_accumulator_ms)
            return replace(state, phase=Phase.PAUSED), [GameEvent(EVENT_PAUSED)]
        if state.is_paused:
            logger.debug("resumed")
            return replace(state, phase=Phase.RUNNING), [GameEvent(EVENT_RESUMED)]
        return state, []

    def reset(self, state: EngineState) -> Transition:
        if state.is_paused:
            return state, []
        logger.debug("reset")
        return self.new_game(), [GameEvent(EVENT_RESET)]

    def ghost(self, state: EngineState) -> Piece:
        """Where the active piece would land on a hard drop."""
        return state.active.moved(0, drop_distance(state.board, state.active))

    # ------------------------------------------------------------------
    # Lock sequence
    # ------------------------------------------------------------------
    def _game_over(self, state: EngineState, events: List[GameEvent]) -> EngineState:
        logger.info("game over: score=%d level=%d lines=%d", state.score, state.level, state.lines_cleared)
        events.append(GameEvent(EVENT_GAME_OVER, {"score": state.score}))
        return replace(state, phase=Phase.GAME_OVER)

    def _lock(self, state: EngineState, events: List[GameEvent]) -> EngineState:
        piece = state.active
        # A piece that never left the spawn row, or a stack reaching the top zone, ends the game unmerged.
        if piece.y <= 0 or state.board.top_zone_occupied(self.config.top_zone_rows):
            return self._game_over(state, events)

        board, cleared = state.board.merge(piece).clear_full_rows()
        events.append(GameEvent(EVENT_LOCK, {"piece": piece}))
        logger.debug("locked %s at (%d, %d)", piece.kind.name, piece.x, piece.y)

        score, lines, level, interval = state.score, state.lines_cleared, state.level, state.drop_interval_ms
        if cleared:
            score += self.rules.points_for_lock(cleared, level)
            lines += cleared
            events.append(GameEvent(EVENT_LINES_CLEARED, {"count": cleared}))
            logger.debug("cleared %d line(s), score=%d", cleared, score)
            new_level = self.rules.level_for_lines(lines)
            if new_level != level:
                level = new_level
                interval = self.rules.drop_interval_ms(level, self.config.base_interval_ms)
                events.append(GameEvent(EVENT_LEVEL_UP, {"level": level}))
                logger.debug("level %d, drop interval %.1f ms", level, interval)

        state = replace(
            state,
            board=board,
            active=state.next,
            next=self._draw(),
            can_hold=True,
            score=score,
            lines_cleared=lines,
            level=level,
            drop_interval_ms=interval,
        )
        if collides(state.board, state.active, 0, 0):
            return self._game_over(state, events)
        return state


class BlockDropGame:
    """Session wrapper that owns the current state and publishes events on a bus.

    Hosts (renderers, input loops, environments) drive this object; calls
    must be serialized by the host.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        rules: Optional[ScoringRules] = None,
        catalog: Optional[PieceCatalog] = None,
        rng: Optional[random.Random] = None,
        bus: Optional[EventBus] = None,
    ) -> None:
        self.engine = Engine(config, rules, catalog, rng)
        self.bus = bus or EventBus()
        self.state = self.engine.new_game()

    @property
    def config(self) -> GameConfig:
        return self.engine.config

    @property
    def score(self) -> int:
        return self.state.score

    @property
    def game_over(self) -> bool:
        return self.state.is_game_over

    def _commit(self, transition: Transition) -> List[GameEvent]:
        self.state, events = transition
        self.bus.publish(events)
        return events

    def step(self, action: Action) -> List[GameEvent]:
        return self._commit(self.engine.apply(self.state, action))

    def tick(self, delta_ms: float) -> List[GameEvent]:
        return self._commit(self.engine.tick(self.state, delta_ms))

    def reset(self, seed: Optional[int] = None) -> List[GameEvent]:
        if seed is not None:
            self.engine.rng.seed(seed)
        # Session restart bypasses the pause guard on the reset action
        return self._commit((self.engine.new_game(), [GameEvent(EVENT_RESET)]))

    def ghost(self) -> Piece:
        return self.engine.ghost(self.state)

    def get_state(self) -> Dict[str, Any]:
        return self.state.snapshot()
