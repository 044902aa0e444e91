import os
import sys
import pytest

# Ensure the backend root (containing the `livequiz` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from livequiz import create_app, db, socketio
from livequiz.errors import PersistenceFailure, QuizNotFound
from livequiz.services.sessions import Outbound, SessionController, SessionRegistry


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SOCKETIO_NAMESPACE = '/ws'
    POINTS_PER_CORRECT = 100
    DEFAULT_TIME_LIMIT_SEC = 20
    TICK_INTERVAL_SEC = 1
    ENABLE_TIMERS_IN_TESTS = False


TWO_QUESTION_QUIZ = {
    'title': 'Capitals',
    'questions': [
        {'text': 'Capital of France?', 'options': ['Berlin', 'Paris', 'Rome', 'Madrid'],
         'correct_option_index': 1, 'time_limit': 3},
        {'text': 'Capital of Japan?', 'options': ['Tokyo', 'Seoul', 'Beijing', 'Bangkok'],
         'correct_option_index': 0, 'time_limit': 2},
    ],
}


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    with application.app_context():
        # Ensure models are imported so tables are created
        import livequiz.models  # noqa: F401
        db.create_all()
        yield application
        db.session.remove()
        db.drop_all()


class TimedConfig(TestConfig):
    ENABLE_TIMERS_IN_TESTS = True
    TICK_INTERVAL_SEC = 0.05


@pytest.fixture()
def timed_app():
    application = create_app(TimedConfig)
    with application.app_context():
        import livequiz.models  # noqa: F401
        db.create_all()
        yield application
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def sio_client(flask_app):
    test_client = socketio.test_client(
        flask_app,
        flask_test_client=flask_app.test_client(),
        namespace='/ws'
    )
    yield test_client
    try:
        test_client.disconnect(namespace='/ws')
    except Exception:
        pass


@pytest.fixture()
def quiz(client):
    res = client.post('/api/quizzes', json=TWO_QUESTION_QUIZ)
    assert res.status_code == 201
    return res.get_json()


# ---- in-memory collaborators for controller unit tests ----

class RecordingOutbound(Outbound):
    def __init__(self):
        self.sent = []  # (kind, target, event, payload)
        self.rooms = {}

    def to_room(self, room, event, payload=None):
        self.sent.append(('room', room, event, payload))

    def to_participant(self, sid, event, payload=None):
        self.sent.append(('sid', sid, event, payload))

    def join(self, sid, room):
        self.rooms.setdefault(room, []).append(sid)

    def events(self, event=None):
        return [s for s in self.sent if event is None or s[2] == event]

    def clear(self):
        self.sent.clear()


class FakeClock:
    def __init__(self, now=1000.0):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


class MemoryQuizStore:
    def __init__(self, quizzes=None):
        self.quizzes = dict(quizzes or {})
        self.loads = 0
        self.fail = False

    def load(self, quiz_id):
        self.loads += 1
        if self.fail:
            raise PersistenceFailure('store offline')
        if quiz_id not in self.quizzes:
            raise QuizNotFound(quiz_id)
        return self.quizzes[quiz_id]


class MemoryArchive:
    def __init__(self):
        self.saved = []
        self.fail = False

    def save(self, record):
        if self.fail:
            raise PersistenceFailure('archive offline')
        self.saved.append(record)
        return record


def make_quiz_dict(quiz_id=1, time_limits=(20, 20)):
    return {
        'id': quiz_id,
        'title': 'Sample',
        'questions': [
            {'text': f'Question {i + 1}?', 'options': ['A', 'B', 'C', 'D'],
             'correct_option_index': i % 4, 'time_limit': limit}
            for i, limit in enumerate(time_limits)
        ],
    }


@pytest.fixture()
def outbound():
    return RecordingOutbound()


@pytest.fixture()
def clock():
    return FakeClock()


@pytest.fixture()
def quiz_store():
    return MemoryQuizStore({1: make_quiz_dict(1), 2: make_quiz_dict(2, time_limits=(3, 2)), 3: make_quiz_dict(3, ())})


@pytest.fixture()
def archive():
    return MemoryArchive()


@pytest.fixture()
def controller(outbound, quiz_store, archive, clock):
    return SessionController(
        outbound=outbound,
        quiz_store=quiz_store,
        archive=archive,
        registry=SessionRegistry(),
        clock=clock,
    )
