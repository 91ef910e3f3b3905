import logging
from typing import Callable, Optional

from chessroom.models import Game
from .clock import Clock
from .outbox import Outbox
from .registry import SessionRegistry


class MoveRouter:
    """Turn-checked move relay for one registry of games.

    A move is only considered when its sender is the player the oracle
    says is to move. Accepted moves reach the whole room; rejected ones
    go back to the sender alone.
    """

    def __init__(
        self,
        registry: SessionRegistry,
        outbox: Outbox,
        clock: Clock,
        end_game: Callable[[Game, Optional[str], str], None],
        allowance: int = 30,
        logger: Optional[logging.Logger] = None,
    ):
        self._registry = registry
        self._outbox = outbox
        self._clock = clock
        self._end_game = end_game
        self._allowance = allowance
        self._logger = logger or logging.getLogger(__name__)

    def on_move(self, sid: str, game_id, move) -> bool:
        with self._registry.lock:
            game = self._registry.get(game_id)
            if not game:
                self._logger.debug(f"[move-drop] game={game_id} sid={sid} unknown game")
                return False

            mover = game.oracle.turn()
            if game.player_for(mover) != sid:
                self._logger.debug(f"[move-drop] game={game.id} sid={sid} not {mover} to move")
                return False

            result = game.oracle.apply(move)
            if not result.success:
                self._logger.info(f"[move-reject] game={game.id} sid={sid} move={move}")
                self._outbox.emit('invalidMove', move, to=sid)
                return False

            to_move = game.oracle.turn()
            game.set_seconds(to_move, self._allowance)
            self._outbox.emit('move', result.move, to=game.room)
            self._outbox.emit('boardState', result.fen, to=game.room)
            self._outbox.emit('timerUpdate', game.clock_payload(), to=game.room)
            self._logger.info(f"[move-ok] game={game.id} side={mover} san={result.move.get('san') if result.move else None}")

            if game.oracle.is_checkmate():
                self._end_game(game, mover, 'Checkmate')
            elif game.oracle.is_draw():
                self._end_game(game, None, 'Draw')
            else:
                self._clock.start(game.id)
            return True

    def on_request_board_state(self, sid: str, game_id) -> bool:
        with self._registry.lock:
            game = self._registry.get(game_id)
            if not game:
                return False
            self._outbox.emit('boardState', game.oracle.fen(), to=sid)
            return True
