from flask import current_app, request
from flask_socketio import emit

from livequiz import socketio
from livequiz.errors import SessionNotFound
from livequiz.models import PLAYER_NAME_MAX_LENGTH
from livequiz.services.sessions.controller import get_controller


def _get_sid() -> str:
    # type: ignore: request.sid exists in Socket.IO context
    return request.sid  # type: ignore


def _session_code(data):
    code = (data or {}).get('code') if isinstance(data, dict) else data
    if code is None:
        return None
    return str(code).strip() or None


def handle_connect():
    emit('connected', {'message': 'Connected to /ws'})


def handle_disconnect(*args):
    # No resume support: the player record stays in the roster with its score
    current_app.logger.info(f"[disconnect] sid={_get_sid()}")


def handle_create_session(data):
    quiz_id = (data or {}).get('quiz_id') if isinstance(data, dict) else data
    if quiz_id is None:
        emit('error', {'message': 'quiz_id is required'})
        return
    get_controller().create_session(quiz_id, _get_sid())


def handle_join_session(data):
    code = _session_code(data)
    name = (data or {}).get('name') if isinstance(data, dict) else None
    name = name.strip() if isinstance(name, str) else ''
    if not code or not name:
        emit('error', {'message': 'code and name are required'})
        return
    if len(name) > PLAYER_NAME_MAX_LENGTH:
        emit('error', {'message': f'name must be at most {PLAYER_NAME_MAX_LENGTH} characters'})
        return
    try:
        get_controller().join_session(code, _get_sid(), name)
    except SessionNotFound as exc:
        emit('error', {'message': 'Session not found', 'code': exc.code})


def handle_start_session(data):
    code = _session_code(data)
    if code:
        get_controller().start_session(code, _get_sid())


def handle_advance_question(data):
    code = _session_code(data)
    if code:
        get_controller().advance_question(code, _get_sid())


def handle_submit_answer(data):
    if not isinstance(data, dict):
        return
    code = _session_code(data)
    try:
        answer_index = int(data.get('answer_index'))
    except (TypeError, ValueError):
        return
    if code:
        get_controller().submit_answer(code, _get_sid(), answer_index)


def register_socketio_handlers(namespace: str = '/ws') -> None:
    """Register the live session Socket.IO event handlers on ``namespace``."""
    socketio.on_event('connect', handle_connect, namespace=namespace)
    socketio.on_event('disconnect', handle_disconnect, namespace=namespace)
    socketio.on_event('create-session', handle_create_session, namespace=namespace)
    socketio.on_event('join-session', handle_join_session, namespace=namespace)
    socketio.on_event('start-session', handle_start_session, namespace=namespace)
    socketio.on_event('submit-answer', handle_submit_answer, namespace=namespace)
    socketio.on_event('advance-question', handle_advance_question, namespace=namespace)
