from flask import Blueprint

from arcade.errors import success
from arcade.schemas import TeamCredentials, load_json
from arcade.services.teams import register_team, validate_credentials

teams = Blueprint('teams', __name__)


@teams.route('/register', methods=['POST'])
def register():
    payload = load_json(TeamCredentials)
    data = register_team(payload.team_name, payload.access_code)
    return success(data, data['message'], status=200 if data['teamId'] == 'admin' else 201)


@teams.route('/validate', methods=['POST'])
def validate():
    payload = load_json(TeamCredentials)
    data = validate_credentials(payload.team_name, payload.access_code)
    return success(data, data['message'])
