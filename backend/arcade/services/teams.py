"""Team registration and lookup."""

from flask import current_app

from arcade import db
from arcade.errors import Conflict, NotFound, ValidationFailed
from arcade.models import GameSession, Team
from arcade.services.rules import ADMIN_DIFFICULTY, difficulty_for_access_code
from arcade.socketio_events import notify_admins

DUPLICATE_NAME_MESSAGE = 'This team name has already been used! Please choose a different team name.'


def find_team_by_name(team_name: str):
    return Team.query.filter_by(name_key=Team.normalize_name(team_name)).first()


def _check_credentials(team_name: str, access_code: str) -> str:
    if find_team_by_name(team_name):
        raise Conflict(DUPLICATE_NAME_MESSAGE, error_code='TEAM_EXISTS')
    return difficulty_for_access_code(access_code, current_app.config.get('ADMIN_ACCESS_CODE'))


def validate_credentials(team_name: str, access_code: str) -> dict:
    """Check a name and code without persisting anything.

    The admin code is accepted before the name is looked up.
    """
    admin_code = current_app.config.get('ADMIN_ACCESS_CODE')
    if admin_code and access_code == admin_code:
        return {'isValid': True, 'difficulty': ADMIN_DIFFICULTY, 'message': 'Admin access code validated'}
    difficulty = _check_credentials(team_name, access_code)
    return {'isValid': True, 'difficulty': difficulty, 'message': 'Team name and access code are valid'}


def register_team(team_name: str, access_code: str) -> dict:
    """Create a Team and its GameSession.

    The admin code returns a pseudo-session and persists nothing. Team and
    session are committed separately.
    """
    difficulty = _check_credentials(team_name, access_code)
    if difficulty == ADMIN_DIFFICULTY:
        current_app.logger.info("[register] admin access granted")
        return {
            'teamId': 'admin',
            'sessionId': 'admin',
            'difficulty': ADMIN_DIFFICULTY,
            'message': 'Admin access granted',
        }

    team = Team(team_name=team_name, access_code=access_code, difficulty=difficulty)
    db.session.add(team)
    db.session.commit()

    session = GameSession(team_id=team.id, status='active')
    db.session.add(session)
    db.session.commit()

    current_app.logger.info(f"[register] team={team.id} name={team.team_name!r} difficulty={difficulty} session={session.session_id}")
    notify_admins(team)
    return {
        'teamId': str(team.id),
        'sessionId': session.session_id,
        'difficulty': difficulty,
        'message': 'Team registered successfully',
    }


def list_teams(difficulty=None) -> dict:
    query = Team.query
    if difficulty:
        query = query.filter_by(difficulty=difficulty)
    teams = query.order_by(Team.completed_at.desc().nulls_last(), Team.created_at.desc()).all()
    formatted = [team.to_dict() for team in teams]
    completed = [t for t in formatted if t['gameCompleted']]
    in_progress = [t for t in formatted if not t['gameCompleted']]
    return {
        'totalTeams': len(formatted),
        'completedTeams': len(completed),
        'inProgressTeams': len(in_progress),
        'teams': formatted,
        'completedOnly': completed,
        'inProgressOnly': in_progress,
    }


def get_team(team_name=None, team_id=None) -> Team:
    if team_id is not None:
        team = db.session.get(Team, team_id)
    elif team_name:
        team = find_team_by_name(team_name)
    else:
        raise ValidationFailed('Please provide either teamName or teamId', error_code='INVALID_REQUEST')
    if not team:
        raise NotFound('Team not found', error_code='TEAM_NOT_FOUND')
    return team
