import random
import string
import time
from dataclasses import dataclass, field
from typing import Any, Container, Optional, Set

WHITE = 'w'
BLACK = 'b'
SIDE_NAMES = {WHITE: 'White', BLACK: 'Black'}


def opposite(side: str) -> str:
    return BLACK if side == WHITE else WHITE


def generate_game_code(taken: Container[str], length: int = 6) -> str:
    """Generate a unique, short game code."""
    while True:
        code = ''.join(random.choices(string.ascii_uppercase + string.digits, k=length))
        if code not in taken:
            return code


@dataclass
class Game:
    id: str
    white: str
    black: str
    oracle: Any
    white_seconds: int = 30
    black_seconds: int = 30
    timer_handle: Optional[Any] = None
    clock_generation: int = 0
    spectators: Set[str] = field(default_factory=set)
    created_at: float = field(default_factory=time.time)

    @property
    def room(self) -> str:
        return f"game:{self.id}"

    def side_of(self, sid: str) -> Optional[str]:
        if sid == self.white:
            return WHITE
        if sid == self.black:
            return BLACK
        return None

    def player_for(self, side: str) -> str:
        return self.white if side == WHITE else self.black

    def seconds_for(self, side: str) -> int:
        return self.white_seconds if side == WHITE else self.black_seconds

    def set_seconds(self, side: str, value: int) -> None:
        if side == WHITE:
            self.white_seconds = value
        else:
            self.black_seconds = value

    def clock_payload(self) -> dict:
        return {
            'whiteSeconds': max(0, self.white_seconds),
            'blackSeconds': max(0, self.black_seconds),
        }

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'fen': self.oracle.fen(),
            'turn': self.oracle.turn(),
            **self.clock_payload(),
            'spectators': len(self.spectators),
            'created_at': self.created_at,
        }
