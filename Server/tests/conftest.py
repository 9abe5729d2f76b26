import os
import random
import tempfile

os.environ.setdefault('LOG_DIR', os.path.join(tempfile.gettempdir(), 'escape_room_test_logs'))

import mongomock
import pytest

from escape_room import create_app
from escape_room.config import TestingConfig


@pytest.fixture
def database():
    return mongomock.MongoClient()[TestingConfig.MONGO_DB_NAME]


@pytest.fixture
def app_and_socketio(database):
    return create_app(TestingConfig, database=database, rng=random.Random(1234))


@pytest.fixture
def app(app_and_socketio):
    return app_and_socketio[0]


@pytest.fixture
def socketio(app_and_socketio):
    return app_and_socketio[1]


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def service(app):
    return app.room_service


def correct_answers(questions, group=None):
    """Correct option indices for one group (or all questions when group is None)."""
    return [q.correct_answer for q in questions if group is None or q.group == group]
