from arcade.errors import Conflict, Forbidden, NotFound
from arcade.models import GameSession
from arcade.services.rules import can_transition


def load_session(session_id: str) -> GameSession:
    session = GameSession.query.filter_by(session_id=session_id).first()
    if not session:
        raise NotFound('Game session not found', error_code='SESSION_NOT_FOUND')
    return session


def require_mine_eligibility(session: GameSession) -> None:
    if not session.can_play_mine:
        raise Forbidden('Quiz score not sufficient for mine game', error_code='NOT_ELIGIBLE')


def advance_status(session: GameSession, target: str) -> None:
    """Move the session forward to ``target``; backwards or repeated moves conflict."""
    if not can_transition(session.status, target):
        raise Conflict(
            f'Cannot move session from {session.status} to {target}',
            error_code='INVALID_STATUS_TRANSITION',
        )
    session.status = target
