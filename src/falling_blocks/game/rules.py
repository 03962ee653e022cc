from __future__ import annotations

from dataclasses import dataclass


@dataclass
class ScoringRules:
    line_clear_scores: tuple[int, int, int, int] = (100, 300, 500, 800)
    lines_per_level: int = 10

    def score_for_lines(self, lines: int) -> int:
        if lines <= 0:
            return 0
        if 1 <= lines <= 4:
            return self.line_clear_scores[lines - 1]
        # Unreachable with four-row shapes; extrapolated for rule variants
        return self.line_clear_scores[-1] + (lines - 4) * 400

    def points_for_lock(self, lines: int, level: int) -> int:
        return self.score_for_lines(lines) * level

    def level_for_lines(self, total_lines: int) -> int:
        return total_lines // self.lines_per_level + 1

    def drop_interval_ms(self, level: int, base_interval_ms: float) -> float:
        return base_interval_ms / level
