"""Client commands understood by the coordinator.

Socket.IO events are turned into these before they reach game logic, so
every transition can be driven synchronously in tests.
"""

from dataclasses import dataclass
from typing import Any, Optional


@dataclass(frozen=True)
class Connect:
    pass


@dataclass(frozen=True)
class SubmitMove:
    game_id: Any
    move: Any


@dataclass(frozen=True)
class RequestBoardState:
    game_id: Any


@dataclass(frozen=True)
class Spectate:
    game_id: Any


@dataclass(frozen=True)
class PlayerExit:
    pass


@dataclass(frozen=True)
class Disconnect:
    pass


def parse_command(event: str, data: Any = None) -> Optional[object]:
    """Build a command from a client event name and payload, or None."""
    if event == 'connect':
        return Connect()
    if event == 'disconnect':
        return Disconnect()
    if event == 'playerExit':
        return PlayerExit()
    if not isinstance(data, dict):
        return None
    if event == 'move':
        return SubmitMove(game_id=data.get('gameId'), move=data.get('move'))
    if event == 'requestBoardState':
        return RequestBoardState(game_id=data.get('gameId'))
    if event == 'spectate':
        return Spectate(game_id=data.get('gameId'))
    return None
