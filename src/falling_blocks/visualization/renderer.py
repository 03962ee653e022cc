from __future__ import annotations

from typing import Optional, Tuple

import numpy as np
import pygame

from falling_blocks.game import EngineState, Piece, PieceCatalog

BACKGROUND = (10, 10, 14)
EMPTY_CELL = (20, 20, 26)
TEXT = (230, 230, 230)


class Renderer:
    """Draws engine snapshots; never mutates them."""

    def __init__(self, catalog: PieceCatalog, cell_size: int = 30, margin: int = 20, panel_cells: int = 6) -> None:
        self.catalog = catalog
        self.cell_size = cell_size
        self.margin = margin
        self.panel_cells = panel_cells
        self._font: Optional[pygame.font.Font] = None

    def window_size(self, height: int, width: int) -> Tuple[int, int]:
        board_w = width * self.cell_size
        board_h = height * self.cell_size
        panel_w = self.panel_cells * self.cell_size
        return self.margin * 3 + board_w + panel_w, self.margin * 2 + board_h

    def _color_for_value(self, v: int) -> Tuple[int, int, int]:
        return EMPTY_CELL if v == 0 else self.catalog.color(abs(v))

    def _font_or_default(self) -> pygame.font.Font:
        if self._font is None:
            self._font = pygame.font.SysFont(None, 24)
        return self._font

    def _grid_surface(self, view: np.ndarray, ghost: Optional[Piece]) -> pygame.Surface:
        h, w = view.shape
        surf = pygame.Surface((w * self.cell_size, h * self.cell_size))
        surf.fill((30, 30, 36))
        for y in range(h):
            for x in range(w):
                rect = pygame.Rect(x * self.cell_size, y * self.cell_size, self.cell_size - 1, self.cell_size - 1)
                pygame.draw.rect(surf, self._color_for_value(int(view[y, x])), rect)
        if ghost is not None:
            color = self.catalog.color(ghost.color_id)
            for x, y in ghost.cells():
                if 0 <= y < h and view[y, x] == 0:
                    rect = pygame.Rect(x * self.cell_size, y * self.cell_size, self.cell_size - 1, self.cell_size - 1)
                    pygame.draw.rect(surf, color, rect, 2)
        return surf

    def _draw_preview(self, screen: pygame.Surface, piece: Optional[Piece], label: str, x0: int, y0: int) -> None:
        screen.blit(self._font_or_default().render(label, True, TEXT), (x0, y0))
        if piece is None:
            return
        color = self.catalog.color(piece.color_id)
        for py in range(piece.height):
            for px in range(piece.width):
                if piece.shape[py, px]:
                    rect = pygame.Rect(
                        x0 + px * self.cell_size,
                        y0 + 24 + py * self.cell_size,
                        self.cell_size - 1,
                        self.cell_size - 1,
                    )
                    pygame.draw.rect(screen, color, rect)

    def draw(self, screen: pygame.Surface, state: EngineState, ghost: Optional[Piece] = None) -> None:
        view = state.view()
        screen.fill(BACKGROUND)
        screen.blit(self._grid_surface(view, None if state.is_game_over else ghost), (self.margin, self.margin))

        x_panel = self.margin * 2 + state.board.width * self.cell_size
        self._draw_preview(screen, state.next, "Next", x_panel, self.margin)
        self._draw_preview(screen, state.held, "Hold", x_panel, self.margin + 4 * self.cell_size)

        font = self._font_or_default()
        info_lines = [
            f"Score: {state.score}",
            f"Level: {state.level}",
            f"Lines: {state.lines_cleared}",
        ]
        y_text = self.margin + 8 * self.cell_size
        for i, txt in enumerate(info_lines):
            screen.blit(font.render(txt, True, TEXT), (x_panel, y_text + i * 22))

        banner = None
        if state.is_game_over:
            banner = "Game Over - Press R to restart"
        elif state.is_paused:
            banner = "Paused - Press P to resume"
        if banner:
            text = font.render(banner, True, (255, 100, 100))
            rect = text.get_rect(center=(self.margin + state.board.width * self.cell_size // 2, screen.get_height() // 2))
            screen.blit(text, rect)
        pygame.display.flip()
