import threading
from typing import Callable, Dict, List, Optional

from chessroom.models import Game, generate_game_code


class SessionRegistry:
    """Active games keyed by id, plus the single waiting slot.

    ``lock`` serializes every handler step and clock tick that touches
    this registry.
    """

    def __init__(self, oracle_factory: Callable[[], object], allowance: int = 30, capacity: int = 0):
        self.lock = threading.RLock()
        self._oracle_factory = oracle_factory
        self._allowance = allowance
        self._capacity = capacity
        self._games: Dict[str, Game] = {}
        self._waiting: Optional[str] = None

    # ---- waiting slot ----
    @property
    def waiting(self) -> Optional[str]:
        return self._waiting

    def park(self, sid: str) -> None:
        if self._waiting is not None:
            raise ValueError(f"waiting slot already held by {self._waiting}")
        if self.find_by_player(sid):
            raise ValueError(f"{sid} is already seated in a game")
        self._waiting = sid

    def take_waiting(self) -> Optional[str]:
        sid, self._waiting = self._waiting, None
        return sid

    def clear_waiting(self, sid: str) -> bool:
        if self._waiting is not None and self._waiting == sid:
            self._waiting = None
            return True
        return False

    # ---- games ----
    @property
    def is_full(self) -> bool:
        return self._capacity > 0 and len(self._games) >= self._capacity

    def create_game(self, white: str, black: str) -> Game:
        if white == black:
            raise ValueError('a game needs two distinct players')
        for sid in (white, black):
            if sid == self._waiting or self.find_by_player(sid):
                raise ValueError(f"{sid} is already waiting or seated")
        game = Game(
            id=generate_game_code(self._games),
            white=white,
            black=black,
            oracle=self._oracle_factory(),
            white_seconds=self._allowance,
            black_seconds=self._allowance,
        )
        self._games[game.id] = game
        return game

    def get(self, game_id) -> Optional[Game]:
        if not isinstance(game_id, str):
            return None
        # Codes are issued upper-case; clients may echo them in any case
        return self._games.get(game_id.strip().upper())

    def remove(self, game_id: str) -> bool:
        return self._games.pop(game_id, None) is not None

    def find_by_player(self, sid: str) -> Optional[Game]:
        for game in self._games.values():
            if game.side_of(sid):
                return game
        return None

    def find_by_spectator(self, sid: str) -> Optional[Game]:
        for game in self._games.values():
            if sid in game.spectators:
                return game
        return None

    def latest(self) -> Optional[Game]:
        if not self._games:
            return None
        return list(self._games.values())[-1]

    def games(self) -> List[Game]:
        return list(self._games.values())

    def __len__(self) -> int:
        return len(self._games)

    def __contains__(self, game_id) -> bool:
        return self.get(game_id) is not None
