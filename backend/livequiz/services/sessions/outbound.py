import abc

from flask_socketio import join_room

from livequiz import socketio


class Outbound(abc.ABC):
    """Messages from the session engine to connected participants."""

    @abc.abstractmethod
    def to_room(self, room: str, event: str, payload=None) -> None:
        raise NotImplementedError

    @abc.abstractmethod
    def to_participant(self, sid: str, event: str, payload=None) -> None:
        raise NotImplementedError

    @abc.abstractmethod
    def join(self, sid: str, room: str) -> None:
        raise NotImplementedError


class SocketIOOutbound(Outbound):
    """Outbound over the Flask-SocketIO server.

    Uses ``socketio.emit`` rather than the context-bound ``emit`` since
    countdown ticks are sent from background tasks.
    """

    def __init__(self, namespace: str = '/ws'):
        self.namespace = namespace

    def to_room(self, room, event, payload=None):
        socketio.emit(event, payload, to=room, namespace=self.namespace)

    def to_participant(self, sid, event, payload=None):
        socketio.emit(event, payload, to=sid, namespace=self.namespace)

    def join(self, sid, room):
        join_room(room, sid=sid, namespace=self.namespace)
