# guessthegame/stats.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List

from guessthegame.config import MAX_GUESSES
from guessthegame.models import Game


def decade_of(year: int) -> str:
    return f"{(year // 10) * 10}s"


@dataclass
class EndlessStats:
    """Lifetime endless-mode results. Survives run resets."""
    total_correct: int = 0
    total_incorrect: int = 0
    guess_distribution: List[int] = field(default_factory=lambda: [0] * MAX_GUESSES)
    genre_stats: Dict[str, Dict[str, int]] = field(default_factory=dict)
    decade_stats: Dict[str, Dict[str, int]] = field(default_factory=dict)

    def record_result(self, game: Game, was_correct: bool, guess_count: int) -> None:
        if was_correct:
            self.total_correct += 1
            idx = min(max(guess_count, 1), MAX_GUESSES) - 1
            self.guess_distribution[idx] += 1
        else:
            self.total_incorrect += 1

        for bucket, key in ((self.genre_stats, game.genre or "Unknown"),
                            (self.decade_stats, decade_of(game.year or 2000))):
            entry = bucket.setdefault(key, {"correct": 0, "total": 0})
            entry["correct"] += 1 if was_correct else 0
            entry["total"] += 1

    def reset(self) -> None:
        self.total_correct = 0
        self.total_incorrect = 0
        self.guess_distribution = [0] * MAX_GUESSES
        self.genre_stats = {}
        self.decade_stats = {}

    @property
    def total_games(self) -> int:
        return self.total_correct + self.total_incorrect

    @property
    def win_rate(self) -> float:
        if not self.total_games:
            return 0.0
        return self.total_correct / self.total_games * 100

    @property
    def average_guesses(self) -> float:
        if not self.total_correct:
            return 0.0
        total = sum(count * (i + 1) for i, count in enumerate(self.guess_distribution))
        return total / self.total_correct
