"""Game module for Falling Blocks.

Exports the headless engine and supporting pieces:
- Board: Immutable grid with merge and line clearing
- Piece / PieceCatalog / TetrominoType: Shapes, colors and random spawning
- collides / try_rotate / landing_y: Collision and wall-kick rotation
- ScoringRules: Line-clear points, leveling and drop speed
- Engine / EngineState / Phase / Action: The state machine and its snapshots
- BlockDropGame: Session wrapper that publishes events on an EventBus
"""

from .errors import ConfigurationError
from .pieces import PALETTE, Piece, PieceCatalog, TetrominoType, rotate_cw
from .grid import Board, clear_full_rows, merge
from .collision import KICK_OFFSETS, collides, drop_distance, landing_y, try_rotate
from .rules import ScoringRules
from .events import EventBus, GameEvent
from .core import Action, BlockDropGame, Engine, EngineState, GameConfig, Phase

__all__ = [
    "ConfigurationError",
    "PALETTE",
    "Piece",
    "PieceCatalog",
    "TetrominoType",
    "rotate_cw",
    "Board",
    "clear_full_rows",
    "merge",
    "KICK_OFFSETS",
    "collides",
    "drop_distance",
    "landing_y",
    "try_rotate",
    "ScoringRules",
    "EventBus",
    "GameEvent",
    "Action",
    "BlockDropGame",
    "Engine",
    "EngineState",
    "GameConfig",
    "Phase",
]
