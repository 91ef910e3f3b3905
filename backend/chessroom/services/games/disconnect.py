import logging
from typing import Callable, Optional

from chessroom.models import Game, opposite
from .outbox import Outbox
from .registry import SessionRegistry

OPPONENT_LEFT = 'Opponent left the match'


class DisconnectHandler:
    def __init__(
        self,
        registry: SessionRegistry,
        outbox: Outbox,
        end_game: Callable[[Game, Optional[str], str], None],
        logger: Optional[logging.Logger] = None,
    ):
        self._registry = registry
        self._outbox = outbox
        self._end_game = end_game
        self._logger = logger or logging.getLogger(__name__)

    def on_disconnect(self, sid: str) -> Optional[Game]:
        """Forfeit the game ``sid`` was playing, if any, and return it."""
        registry = self._registry
        with registry.lock:
            if registry.clear_waiting(sid):
                self._logger.info(f"[disconnect] sid={sid} left the waiting slot")
                return None

            game = registry.find_by_player(sid)
            if game:
                side = game.side_of(sid)
                self._logger.info(f"[disconnect] game={game.id} sid={sid} side={side} forfeits")
                self._end_game(game, opposite(side), OPPONENT_LEFT)
                return game

            watched = registry.find_by_spectator(sid)
            if watched:
                watched.spectators.discard(sid)
                self._outbox.leave(sid, watched.room)
            return None
