import logging
from typing import Optional

from chessroom.models import BLACK, WHITE, Game
from .clock import Clock
from .outbox import Outbox
from .registry import SessionRegistry

WAITING_MESSAGE = 'Waiting for opponent...'


class Matchmaker:
    def __init__(self, registry: SessionRegistry, outbox: Outbox, clock: Clock, logger: Optional[logging.Logger] = None):
        self._registry = registry
        self._outbox = outbox
        self._clock = clock
        self._logger = logger or logging.getLogger(__name__)

    def on_connect(self, sid: str) -> Optional[Game]:
        """Park, pair or seat ``sid`` as a spectator.

        Returns the new game when this arrival completed a pairing.
        """
        registry = self._registry
        with registry.lock:
            if registry.is_full:
                game = registry.latest()
                self.seat_spectator(sid, game)
                return None

            if registry.waiting is None:
                registry.park(sid)
                self._outbox.emit('waiting', WAITING_MESSAGE, to=sid)
                self._logger.info(f"[match-wait] sid={sid}")
                return None

            white = registry.take_waiting()
            game = registry.create_game(white=white, black=sid)
            self._logger.info(f"[match-pair] game={game.id} white={white} black={sid}")

            fen = game.oracle.fen()
            for side in (WHITE, BLACK):
                player = game.player_for(side)
                self._outbox.join(player, game.room)
                self._outbox.emit('playerRole', {'role': side, 'gameId': game.id}, to=player)
            for side in (WHITE, BLACK):
                self._outbox.emit('gameStart', {'fen': fen, 'role': side, 'gameId': game.id}, to=game.player_for(side))
            self._outbox.emit('timerUpdate', game.clock_payload(), to=game.room)
            self._clock.start(game.id)
            return game

    def on_spectate(self, sid: str, game_id) -> bool:
        registry = self._registry
        with registry.lock:
            game = registry.get(game_id)
            if not game:
                return False
            if sid == registry.waiting or registry.find_by_player(sid) or registry.find_by_spectator(sid):
                self._logger.debug(f"[spectate-skip] sid={sid} game={game_id} already placed")
                return False
            self.seat_spectator(sid, game)
            return True

    def seat_spectator(self, sid: str, game: Game) -> None:
        game.spectators.add(sid)
        self._outbox.join(sid, game.room)
        self._outbox.emit('spectatorRole', {'gameId': game.id}, to=sid)
        self._outbox.emit('boardState', game.oracle.fen(), to=sid)
        self._logger.info(f"[spectator] game={game.id} sid={sid}")
