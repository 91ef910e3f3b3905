from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Iterator, List, Optional, Protocol


@dataclass(frozen=True)
class Emission:
    event: str
    payload: Any
    to: str  # a sid or a room name


class Transport(Protocol):
    def emit(self, emission: Emission) -> None: ...

    def join(self, sid: str, room: str) -> None: ...

    def leave(self, sid: str, room: str) -> None: ...

    def close_room(self, room: str) -> None: ...


class Outbox:
    """Forwards emissions and room changes to a transport.

    While a ``capture()`` block is open, emissions are also recorded so a
    handler step can hand back exactly what it sent.
    """

    def __init__(self, transport: Transport):
        self._transport = transport
        self._captured: Optional[List[Emission]] = None

    def emit(self, event: str, payload: Any, to: str) -> None:
        emission = Emission(event, payload, to)
        if self._captured is not None:
            self._captured.append(emission)
        self._transport.emit(emission)

    def join(self, sid: str, room: str) -> None:
        self._transport.join(sid, room)

    def leave(self, sid: str, room: str) -> None:
        self._transport.leave(sid, room)

    def close_room(self, room: str) -> None:
        self._transport.close_room(room)

    @contextmanager
    def capture(self) -> Iterator[List[Emission]]:
        outer = self._captured
        captured: List[Emission] = []
        self._captured = captured
        try:
            yield captured
        finally:
            self._captured = outer
            if outer is not None:
                outer.extend(captured)
