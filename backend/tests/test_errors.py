import pytest

from arcade.models import Team
from arcade.services import teams as team_service


@pytest.fixture()
def exploding_client(flask_app):
    def explode():
        raise RuntimeError('database exploded')

    flask_app.add_url_rule('/api/explode', 'explode', explode)
    return flask_app.test_client()


def test_unexpected_error_hides_message(exploding_client):
    res = exploding_client.get('/api/explode')
    assert res.status_code == 500
    body = res.get_json()
    assert body['success'] is False
    assert body['error'] == 'INTERNAL_ERROR'
    assert body['message'] == 'An unexpected error occurred'


def test_unexpected_error_shows_message_in_development(flask_app, exploding_client):
    flask_app.config['APP_ENV'] = 'development'
    res = exploding_client.get('/api/explode')
    assert res.status_code == 500
    assert res.get_json()['message'] == 'database exploded'


def test_oversized_body_rejected(flask_app, client):
    flask_app.config['MAX_CONTENT_LENGTH'] = 64
    res = client.post('/api/teams/register', json={'teamName': 'A' * 40, 'accessCode': 'EASY123' * 10})
    assert res.status_code == 413
    assert res.get_json()['success'] is False
    assert Team.query.count() == 0


def test_unique_violation_maps_to_conflict(client, register, monkeypatch):
    register('Alpha', 'EASY123')
    # skip the lookup so the insert itself hits the unique name_key index
    monkeypatch.setattr(team_service, 'find_team_by_name', lambda team_name: None)
    res = client.post('/api/teams/register', json={'teamName': 'ALPHA', 'accessCode': 'MED456'})
    assert res.status_code == 409
    body = res.get_json()
    assert body['error'] == 'CONFLICT'
    assert body['message'] == 'Duplicate entry: this value already exists'
    assert Team.query.count() == 1

    monkeypatch.undo()
    res = client.post('/api/teams/register', json={'teamName': 'Bravo', 'accessCode': 'MED456'})
    assert res.status_code == 201
