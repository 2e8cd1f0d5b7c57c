import pytest

from arcade import create_app, db
from arcade.middleware import RateLimiter
from conftest import TestConfig


class LimitedConfig(TestConfig):
    RATE_LIMIT_ENABLED = True
    RATE_LIMIT_MAX_REQUESTS = 3
    RATE_LIMIT_WINDOW_SEC = 60


@pytest.fixture()
def limited_client():
    application = create_app(LimitedConfig)
    with application.app_context():
        db.create_all()
        yield application.test_client()
        db.session.remove()
        db.drop_all()


def test_limiter_counts_per_key():
    limiter = RateLimiter(window_sec=60, max_requests=2)
    assert limiter.hit('1.1.1.1', now=100.0)[0] is True
    allowed, remaining, _ = limiter.hit('1.1.1.1', now=101.0)
    assert allowed is True and remaining == 0
    assert limiter.hit('1.1.1.1', now=102.0)[0] is False
    assert limiter.hit('2.2.2.2', now=102.0)[0] is True


def test_limiter_window_resets():
    limiter = RateLimiter(window_sec=60, max_requests=1)
    assert limiter.hit('a', now=0.0)[0] is True
    assert limiter.hit('a', now=30.0)[0] is False
    assert limiter.hit('a', now=61.0)[0] is True


def test_api_requests_are_limited(limited_client):
    for _ in range(3):
        res = limited_client.get('/api/quiz/questions?difficulty=easy')
        assert res.status_code == 200
        assert 'X-RateLimit-Remaining' in res.headers
    res = limited_client.get('/api/quiz/questions?difficulty=easy')
    assert res.status_code == 429
    body = res.get_json()
    assert body['error'] == 'RATE_LIMIT_EXCEEDED'
    assert body['details']['retryAfter'] >= 1
    assert res.headers['X-RateLimit-Remaining'] == '0'


def test_forwarded_address_is_the_key(limited_client):
    for _ in range(3):
        limited_client.get('/api/health', headers={'X-Forwarded-For': '10.0.0.1, 172.16.0.1'})
    assert limited_client.get('/api/health', headers={'X-Forwarded-For': '10.0.0.1'}).status_code == 429
    assert limited_client.get('/api/health', headers={'X-Forwarded-For': '10.0.0.2'}).status_code == 200


def test_non_api_paths_are_not_limited(limited_client):
    for _ in range(5):
        assert limited_client.get('/').status_code == 200
