from __future__ import annotations

import argparse
import logging
from typing import Dict, List, Optional

import pygame

from falling_blocks.game import Action, BlockDropGame, EventBus, GameConfig
from falling_blocks.game.events import ALL_EVENTS
from .renderer import Renderer

logger = logging.getLogger(__name__)


KEY_TO_ACTION: Dict[int, Action] = {
    pygame.K_LEFT: Action.LEFT,
    pygame.K_RIGHT: Action.RIGHT,
    pygame.K_UP: Action.ROTATE,
    pygame.K_DOWN: Action.SOFT_DROP,
    pygame.K_SPACE: Action.HARD_DROP,
    pygame.K_c: Action.HOLD,
    pygame.K_p: Action.PAUSE,
    pygame.K_r: Action.RESET,
}


class CueSink:
    """Stands in for an audio player: logs a cue for every engine event unless muted."""

    def __init__(self, bus: EventBus) -> None:
        self.muted = False
        self.played: List[str] = []
        for name in ALL_EVENTS:
            bus.subscribe(name, self._make_handler(name))

    def _make_handler(self, name: str):
        def handler(sender, **payload) -> None:
            if self.muted:
                return
            self.played.append(name)
            logger.info("cue %s %s", name, payload)
        return handler

    def toggle_mute(self) -> None:
        self.muted = not self.muted


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser()
    p.add_argument("--seed", type=int, default=None)
    p.add_argument("--cell-size", type=int, default=28)
    p.add_argument("--fixed-spawn", type=int, default=None,
                   help="Spawn every piece at this column instead of centering it")
    return p


def run(argv: Optional[List[str]] = None) -> None:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(name)s %(levelname)s %(message)s")

    pygame.init()
    try:
        clock = pygame.time.Clock()
        game = BlockDropGame(GameConfig(random_seed=args.seed, spawn_x=args.fixed_spawn))
        cues = CueSink(game.bus)
        renderer = Renderer(game.engine.catalog, cell_size=args.cell_size)

        screen = pygame.display.set_mode(renderer.window_size(game.config.height, game.config.width))
        pygame.display.set_caption("Falling Blocks - Human Play")

        running = True
        while running:
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type == pygame.KEYDOWN:
                    if event.key == pygame.K_ESCAPE:
                        running = False
                    elif event.key == pygame.K_m:
                        cues.toggle_mute()
                    else:
                        action = KEY_TO_ACTION.get(event.key)
                        if action is not None:
                            game.step(action)

            # The frame clock is the only time source the engine sees
            game.tick(clock.tick(60))
            renderer.draw(screen, game.state, game.ghost())
    finally:
        pygame.quit()


if __name__ == "__main__":  # pragma: no cover
    run()
