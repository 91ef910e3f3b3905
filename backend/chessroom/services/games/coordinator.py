import logging
from typing import Callable, List, Optional

from chessroom.models import Game
from .clock import Clock
from .commands import Connect, Disconnect, PlayerExit, RequestBoardState, Spectate, SubmitMove
from .disconnect import DisconnectHandler
from .matchmaker import Matchmaker
from .oracle import ChessOracle
from .outbox import Emission, Outbox, Transport
from .registry import SessionRegistry
from .router import MoveRouter


class GameCoordinator:
    """Wires the registry, clock, matchmaker, router and disconnect handler.

    ``handle(sid, command)`` is the single entry point for client traffic
    and returns the emissions that step produced. Clock ticks arrive on
    their own through the scheduler.
    """

    def __init__(
        self,
        transport: Transport,
        scheduler,
        allowance: int = 30,
        tick_interval: float = 1.0,
        max_games: int = 0,
        oracle_factory: Callable[[], object] = ChessOracle,
        logger: Optional[logging.Logger] = None,
    ):
        self.logger = logger or logging.getLogger(__name__)
        self.scheduler = scheduler
        self.registry = SessionRegistry(oracle_factory, allowance=allowance, capacity=max_games)
        self.outbox = Outbox(transport)
        self.clock = Clock(
            self.registry, self.outbox, scheduler,
            on_timeout=self.end_game, interval=tick_interval, logger=self.logger,
        )
        self.matchmaker = Matchmaker(self.registry, self.outbox, self.clock, logger=self.logger)
        self.router = MoveRouter(
            self.registry, self.outbox, self.clock, self.end_game,
            allowance=allowance, logger=self.logger,
        )
        self.disconnects = DisconnectHandler(self.registry, self.outbox, self.end_game, logger=self.logger)

    def handle(self, sid: str, command) -> List[Emission]:
        with self.registry.lock, self.outbox.capture() as sent:
            if isinstance(command, Connect):
                self.matchmaker.on_connect(sid)
            elif isinstance(command, SubmitMove):
                self.router.on_move(sid, command.game_id, command.move)
            elif isinstance(command, RequestBoardState):
                self.router.on_request_board_state(sid, command.game_id)
            elif isinstance(command, Spectate):
                self.matchmaker.on_spectate(sid, command.game_id)
            elif isinstance(command, (PlayerExit, Disconnect)):
                self.disconnects.on_disconnect(sid)
            else:
                raise TypeError(f"unsupported command: {command!r}")
        return sent

    def end_game(self, game: Game, winner: Optional[str], reason: str) -> None:
        """Broadcast the outcome, then tear the game down. Runs once per game."""
        with self.registry.lock:
            if game.id not in self.registry:
                return
            payload = {'winner': winner, 'reason': reason}
            if winner is None:
                # Clients branch on this before reading the winner
                payload['draw'] = True
            self.outbox.emit('gameOver', payload, to=game.room)
            self.clock.stop(game.id)
            self.registry.remove(game.id)
            self.outbox.close_room(game.room)
            self.logger.info(f"[game-end] game={game.id} winner={winner} reason={reason}")
