import logging
from typing import Callable, List, Optional

from chessroom.models import SIDE_NAMES, Game, opposite
from .outbox import Outbox
from .registry import SessionRegistry


class TimerHandle:
    def __init__(self):
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class BackgroundScheduler:
    """Repeating callbacks on Socket.IO background tasks.

    Uses ``socketio.sleep`` so the loop cooperates with whichever async
    mode the server runs under.
    """

    def __init__(self, socketio, logger: Optional[logging.Logger] = None):
        self._socketio = socketio
        self._logger = logger or logging.getLogger(__name__)

    def call_every(self, interval: float, callback: Callable[[], None]) -> TimerHandle:
        handle = TimerHandle()

        def _loop():
            while True:
                self._socketio.sleep(interval)
                if handle.cancelled:
                    return
                try:
                    callback()
                except Exception:
                    self._logger.exception('[timer-error] tick callback failed')

        self._socketio.start_background_task(_loop)
        return handle


class _Entry:
    def __init__(self, handle: TimerHandle, interval: float, due: float, callback: Callable[[], None]):
        self.handle = handle
        self.interval = interval
        self.due = due
        self.callback = callback


class ManualScheduler:
    """Logical clock for tests: nothing fires until ``advance`` is called."""

    def __init__(self):
        self.now = 0.0
        self._entries: List[_Entry] = []

    def call_every(self, interval: float, callback: Callable[[], None]) -> TimerHandle:
        handle = TimerHandle()
        self._entries.append(_Entry(handle, interval, self.now + interval, callback))
        return handle

    @property
    def active(self) -> int:
        return sum(1 for e in self._entries if not e.handle.cancelled)

    def advance(self, seconds: float) -> None:
        target = self.now + seconds
        while True:
            self._entries = [e for e in self._entries if not e.handle.cancelled]
            due = [e for e in self._entries if e.due <= target]
            if not due:
                break
            entry = min(due, key=lambda e: e.due)
            self.now = entry.due
            entry.due += entry.interval
            entry.callback()
        self.now = target


class Clock:
    """Per-game countdown for the side to move."""

    def __init__(
        self,
        registry: SessionRegistry,
        outbox: Outbox,
        scheduler,
        on_timeout: Callable[[Game, str, str], None],
        interval: float = 1.0,
        logger: Optional[logging.Logger] = None,
    ):
        self._registry = registry
        self._outbox = outbox
        self._scheduler = scheduler
        self._on_timeout = on_timeout
        self._interval = interval
        self._logger = logger or logging.getLogger(__name__)

    def start(self, game_id: str) -> bool:
        with self._registry.lock:
            game = self._registry.get(game_id)
            if not game:
                return False
            self._cancel(game)
            generation = game.clock_generation
            game.timer_handle = self._scheduler.call_every(
                self._interval, lambda: self._tick(game_id, generation)
            )
            self._logger.debug(
                f"[timer-start] game={game_id} side={game.oracle.turn()} generation={generation}"
            )
            return True

    def stop(self, game_id: str) -> None:
        with self._registry.lock:
            game = self._registry.get(game_id)
            if game:
                self._cancel(game)

    def _cancel(self, game: Game) -> None:
        if game.timer_handle is not None:
            game.timer_handle.cancel()
            game.timer_handle = None
        game.clock_generation += 1

    def _tick(self, game_id: str, generation: int) -> None:
        with self._registry.lock:
            game = self._registry.get(game_id)
            if not game or game.clock_generation != generation:
                self._logger.debug(f"[timer-abort] game={game_id} stale tick generation={generation}")
                return
            side = game.oracle.turn()
            game.set_seconds(side, game.seconds_for(side) - 1)
            self._outbox.emit('timerUpdate', game.clock_payload(), to=game.room)
            if game.seconds_for(side) <= 0:
                self._logger.info(f"[timer-timeout] game={game_id} side={side}")
                self._on_timeout(game, opposite(side), f"{SIDE_NAMES[side]} ran out of time")
