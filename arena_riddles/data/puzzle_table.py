"""
Puzzle Table
============

Per-level lookup of puzzle definitions by puzzle id.

A table belongs to one loaded map; nothing here is global, so two maps
loaded side by side never see each other's puzzles.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional

logger = logging.getLogger(__name__)

PUZZLE_DATA_KEYS = ('prompt', 'ciphertext', 'key', 'answer', 'hint')


def normalize_answer(text: str) -> str:
    return ''.join(str(text).split()).upper()


@dataclass
class Puzzle:
    puzzle_id: str
    type: str = 'cipher'
    data: Dict[str, str] = field(default_factory=dict)

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        return self.data.get(key, default)

    def check_answer(self, text: str) -> bool:
        expected = self.data.get('answer')
        if expected is None:
            return False
        return normalize_answer(text) == normalize_answer(expected)


class PuzzleTable:
    """Mapping of puzzle id to Puzzle, in registration order."""

    def __init__(self):
        self._puzzles: Dict[str, Puzzle] = {}

    def register(self, puzzle: Puzzle) -> None:
        if puzzle.puzzle_id in self._puzzles:
            logger.warning(f"Puzzle '{puzzle.puzzle_id}' registered twice; keeping the latest")
        self._puzzles[puzzle.puzzle_id] = puzzle

    def get(self, puzzle_id: str) -> Optional[Puzzle]:
        return self._puzzles.get(puzzle_id)

    def ids(self) -> List[str]:
        return list(self._puzzles)

    def clear(self) -> None:
        self._puzzles.clear()

    def __contains__(self, puzzle_id: object) -> bool:
        return puzzle_id in self._puzzles

    def __len__(self) -> int:
        return len(self._puzzles)

    def __iter__(self) -> Iterator[Puzzle]:
        return iter(self._puzzles.values())

    @classmethod
    def from_properties(cls, property_bags) -> 'PuzzleTable':
        """
        Build a table from object property dicts. Bags without a
        ``puzzleId`` are ignored.
        """
        table = cls()
        for props in property_bags:
            puzzle_id = props.get('puzzleId')
            if not puzzle_id:
                continue
            data = {k: str(props[k]) for k in PUZZLE_DATA_KEYS if k in props}
            table.register(Puzzle(str(puzzle_id), str(props.get('puzzleType', 'cipher')), data))
        return table
