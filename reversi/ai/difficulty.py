# reversi/ai/difficulty.py
from dataclasses import dataclass
from enum import Enum


class Difficulty(str, Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


@dataclass(frozen=True)
class DifficultyConfig:
    temperature: float
    shortcut_probability: float  # chance of skipping the reasoning call entirely
    max_output_tokens: int = 200


DIFFICULTY_MAP = {
    Difficulty.EASY: DifficultyConfig(temperature=0.9, shortcut_probability=0.7),
    Difficulty.MEDIUM: DifficultyConfig(temperature=0.5, shortcut_probability=0.0),
    Difficulty.HARD: DifficultyConfig(temperature=0.2, shortcut_probability=0.0),
}


def parse_difficulty(difficulty: str | None) -> Difficulty:
    if not difficulty:
        return Difficulty.MEDIUM
    try:
        return Difficulty(str(difficulty).lower())
    except ValueError:
        return Difficulty.MEDIUM


def get_difficulty_config(difficulty: Difficulty | str | None) -> DifficultyConfig:
    if not isinstance(difficulty, Difficulty):
        difficulty = parse_difficulty(difficulty)
    return DIFFICULTY_MAP[difficulty]
