from flask import current_app, request

from chessroom import socketio
from chessroom.services.games import parse_command
from chessroom.services.games.commands import Connect, Disconnect
from chessroom.services.games.outbox import Emission

CLIENT_EVENTS = ('move', 'requestBoardState', 'spectate', 'playerExit')


class SocketIOTransport:
    """Delivers coordinator output through the Flask-SocketIO server.

    Room changes go straight to the underlying server so they also work
    from background tasks that have no request context.
    """

    def __init__(self, sio, namespace: str = '/'):
        self._sio = sio
        self._namespace = namespace

    def emit(self, emission: Emission) -> None:
        self._sio.emit(emission.event, emission.payload, to=emission.to, namespace=self._namespace)

    def join(self, sid: str, room: str) -> None:
        self._sio.server.enter_room(sid, room, namespace=self._namespace)

    def leave(self, sid: str, room: str) -> None:
        self._sio.server.leave_room(sid, room, namespace=self._namespace)

    def close_room(self, room: str) -> None:
        self._sio.close_room(room, namespace=self._namespace)


def _get_sid() -> str:
    # type: ignore: request.sid exists in Socket.IO context
    return request.sid  # type: ignore


def register_socketio_handlers(coordinator, namespace: str = '/') -> None:
    """Register Socket.IO event handlers bound to ``coordinator``."""

    def handle_connect(auth=None):
        current_app.logger.info(f"[connect] sid={_get_sid()}")
        coordinator.handle(_get_sid(), Connect())

    def handle_disconnect(reason=None):
        current_app.logger.info(f"[disconnect] sid={_get_sid()} reason={reason}")
        coordinator.handle(_get_sid(), Disconnect())

    def make_handler(event: str):
        def handler(data=None):
            command = parse_command(event, data)
            if command is None:
                current_app.logger.debug(f"[drop] event={event} sid={_get_sid()} malformed payload")
                return
            coordinator.handle(_get_sid(), command)
        handler.__name__ = f"handle_{event}"
        return handler

    socketio.on_event('connect', handle_connect, namespace=namespace)
    socketio.on_event('disconnect', handle_disconnect, namespace=namespace)
    for event in CLIENT_EVENTS:
        socketio.on_event(event, make_handler(event), namespace=namespace)
