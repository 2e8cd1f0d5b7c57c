import os
import sys
import pytest

# Ensure the backend root (containing the `arcade` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from arcade import create_app, db, socketio

ADMIN_CODE = 'techteammode'


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    APP_ENV = 'test'
    ADMIN_ACCESS_CODE = ADMIN_CODE
    REQUIRE_ADMIN_HEADER = True
    CORS_ORIGINS = ['*']
    RATE_LIMIT_ENABLED = False
    RATE_LIMIT_WINDOW_SEC = 900
    RATE_LIMIT_MAX_REQUESTS = 100
    QUESTION_GENERATION_DELAY_SEC = 0
    DEFAULT_QUIZ_TIMER_SEC = 300
    MAX_CONTENT_LENGTH = 1024 * 1024


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    with application.app_context():
        # Ensure models are imported so tables are created
        import arcade.models  # noqa: F401
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
    if test_client.is_connected('/ws'):
        test_client.disconnect(namespace='/ws')


@pytest.fixture()
def admin_headers():
    return {'X-Admin-Code': ADMIN_CODE}


@pytest.fixture()
def register(client):
    """Register a team and return the response ``data``."""
    def _register(team_name='Alpha', access_code='EASY123'):
        res = client.post('/api/teams/register', json={'teamName': team_name, 'accessCode': access_code})
        assert res.status_code == 201, res.get_json()
        return res.get_json()['data']
    return _register


@pytest.fixture()
def finish_quiz(client):
    """Complete the quiz for a session with the given score."""
    def _finish(session_id, score):
        res = client.post('/api/quiz/complete', json={'sessionId': session_id, 'score': score, 'totalQuestions': 8})
        assert res.status_code == 200, res.get_json()
        return res.get_json()['data']
    return _finish
