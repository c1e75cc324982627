import logging
import os
import sys
import pytest
import fakeredis

# Ensure the backend root (containing the `duoparty` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from duoparty import create_app, db, socketio
from duoparty.registry import RoomRegistry
from duoparty.store import StateStore


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SESSION_CLEANUP_GRACE_SEC = 60
    QUESTIONS_PER_GAME = 20
    ROUND_LIMIT = 20
    CORS_ORIGINS = ['http://localhost:3000']


class FakeQuestionBank:
    """In-memory question bank: ``per_mode`` questions per mode, 10 points each."""

    def __init__(self, per_mode=25, modes=('chill', 'grrr'), points=10):
        self.questions = {
            mode: [
                {'id': f'{mode}-{i}', 'content': f'{mode} question {i}', 'type': 'QUESTION', 'points': points}
                for i in range(1, per_mode + 1)
            ]
            for mode in modes
        }
        self.reports = []

    def fetch_questions(self, mode, exclude_ids, limit):
        exclude_ids = set(exclude_ids)
        return [q for q in self.questions.get(mode, []) if q['id'] not in exclude_ids][:limit]

    def count(self):
        return sum(len(qs) for qs in self.questions.values())

    def list_game_modes(self):
        return [{'id': m, 'slug': m, 'name': m.title()} for m in self.questions]

    def report(self, question_id, game_id=None, room_id=None, round_number=None):
        self.reports.append((question_id, game_id, room_id, round_number))


class RecordingScheduler:
    def __init__(self):
        self.scheduled = []
        self.cancelled = []

    def schedule(self, room):
        self.scheduled.append(room)

    def cancel(self, room):
        self.cancelled.append(room)
        return True


class Timers:
    """Captures spawned cleanup tasks so tests decide when they fire."""

    def __init__(self):
        self.tasks = []

    def spawn(self, fn, *args):
        self.tasks.append((fn, args))

    def run_all(self):
        tasks, self.tasks = self.tasks, []
        for fn, args in tasks:
            fn(*args)


@pytest.fixture()
def logger():
    return logging.getLogger('duoparty.tests')


@pytest.fixture()
def redis_client():
    return fakeredis.FakeRedis(decode_responses=True)


@pytest.fixture()
def store(redis_client, logger):
    return StateStore(redis_client, logger=logger)


@pytest.fixture()
def bank():
    return FakeQuestionBank()


@pytest.fixture()
def registry():
    return RoomRegistry()


@pytest.fixture()
def recording_scheduler():
    return RecordingScheduler()


@pytest.fixture()
def make_bank():
    return FakeQuestionBank


@pytest.fixture()
def timers():
    return Timers()


@pytest.fixture()
def flask_app(redis_client, timers):
    application = create_app(TestConfig, redis_client=redis_client)
    gateway = application.extensions['duoparty.gateway']
    gateway.scheduler.spawn = timers.spawn
    gateway.scheduler.sleep = lambda seconds: None
    with application.app_context():
        # Ensure models are imported so tables are created
        import duoparty.models  # noqa: F401
        from duoparty.seed import seed_catalog
        db.create_all()
        seed_catalog()
        yield application
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def gateway(flask_app):
    return flask_app.extensions['duoparty.gateway']


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def sio_client(flask_app):
    test_client = socketio.test_client(flask_app, flask_test_client=flask_app.test_client())
    yield test_client
    try:
        test_client.disconnect()
    except Exception:
        pass


@pytest.fixture()
def second_client(flask_app):
    test_client = socketio.test_client(flask_app)
    yield test_client
    try:
        test_client.disconnect()
    except Exception:
        pass
