from __future__ import annotations

from typing import Any, Dict, Optional, Tuple

import numpy as np
import gymnasium as gym
from gymnasium import spaces

from falling_blocks.game import Action, BlockDropGame, GameConfig, TetrominoType

# Agent-facing subset of the engine's actions; pause and reset stay with the env.
ENV_ACTIONS: Tuple[Action, ...] = (
    Action.LEFT,
    Action.RIGHT,
    Action.ROTATE,
    Action.SOFT_DROP,
    Action.HARD_DROP,
    Action.HOLD,
    Action.NONE,
)


class FallingBlocksEnv(gym.Env):
    """Headless driver: each step applies one action, then advances the clock by one frame."""

    metadata = {"render_modes": ["rgb_array"], "render_fps": 60}

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        render_mode: Optional[str] = None,
        frame_ms: float = 1000.0 / 60.0,
        max_episode_steps: int = 10000,
    ) -> None:
        super().__init__()
        self.game = BlockDropGame(config)
        self.render_mode = render_mode
        self.frame_ms = float(frame_ms)
        self.max_episode_steps = int(max_episode_steps)

        h, w = self.game.config.height, self.game.config.width
        n_colors = len(self.game.engine.catalog.palette)
        n_kinds = max(int(k) for k in TetrominoType)
        # Board cells: 0 empty, +id locked, -id falling piece
        self.observation_space = spaces.Dict(
            {
                "board": spaces.Box(low=-n_colors, high=n_colors, shape=(h, w), dtype=np.int8),
                "next": spaces.Discrete(n_kinds + 2, start=-1),
                "held": spaces.Discrete(n_kinds + 2, start=-1),
                "can_hold": spaces.Discrete(2),
            }
        )
        self.action_space = spaces.Discrete(len(ENV_ACTIONS))

        self._steps = 0

    def _get_obs(self) -> Dict[str, Any]:
        state = self.game.state
        return {
            "board": state.view().astype(np.int8),
            "next": int(state.next.kind),
            "held": int(state.held.kind) if state.held is not None else -1,
            "can_hold": int(state.can_hold),
        }

    def _get_info(self) -> Dict[str, Any]:
        state = self.game.state
        return {
            "score": state.score,
            "level": state.level,
            "lines_cleared": state.lines_cleared,
            "phase": state.phase.value,
            "steps": self._steps,
        }

    def reset(self, *, seed: Optional[int] = None, options: Optional[dict] = None) -> Tuple[Dict[str, Any], Dict[str, Any]]:
        super().reset(seed=seed)
        self.game.reset(seed)
        self._steps = 0
        return self._get_obs(), self._get_info()

    def step(self, action: int):
        score_before = self.game.score
        events = list(self.game.step(ENV_ACTIONS[int(action)]))
        events.extend(self.game.tick(self.frame_ms))
        self._steps += 1

        reward = float(self.game.score - score_before)
        terminated = bool(self.game.game_over)
        truncated = self._steps >= self.max_episode_steps and not terminated

        info = self._get_info()
        info["events"] = [event.name for event in events]
        return self._get_obs(), reward, terminated, truncated, info

    def render(self) -> Optional[np.ndarray]:
        if self.render_mode != "rgb_array":
            return None
        view = self.game.state.view()
        catalog = self.game.engine.catalog
        cell = 12
        h, w = view.shape
        img = np.zeros((h * cell, w * cell, 3), dtype=np.uint8)
        for y in range(h):
            for x in range(w):
                v = int(view[y, x])
                color = catalog.color(abs(v)) if v else (30, 30, 36)
                img[y * cell : (y + 1) * cell, x * cell : (x + 1) * cell, :] = color
        return img

    def close(self) -> None:
        pass
