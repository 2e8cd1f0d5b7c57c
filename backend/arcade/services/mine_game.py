from flask import current_app

from arcade import db
from arcade.errors import Conflict, ValidationFailed
from arcade.models import MineGameAction, utcnow
from arcade.services.rules import MINE_DONE_STATUSES, MINE_GAME_CONFIGS, grand_total, reveal_outcome
from arcade.services.sessions import advance_status, load_session, require_mine_eligibility
from arcade.socketio_events import notify_admins


def _require_open_game(session):
    if session.status in MINE_DONE_STATUSES:
        raise Conflict('Mine game already completed for this session', error_code='MINE_GAME_COMPLETED')


def start_mine_game(session_id: str, difficulty=None) -> dict:
    session = load_session(session_id)
    require_mine_eligibility(session)
    _require_open_game(session)
    team_difficulty = session.team.difficulty
    if difficulty and difficulty != team_difficulty:
        raise ValidationFailed(
            f'Difficulty {difficulty} does not match the team difficulty {team_difficulty}',
            error_code='DIFFICULTY_MISMATCH',
        )
    current_app.logger.info(f"[mine-start] session={session.session_id} difficulty={team_difficulty}")
    return {
        'sessionId': session.session_id,
        'config': dict(MINE_GAME_CONFIGS[team_difficulty]),
        'difficulty': team_difficulty,
        'message': 'Mine game started successfully',
    }


def record_action(payload) -> dict:
    session = load_session(payload.session_id)
    require_mine_eligibility(session)
    _require_open_game(session)

    result, points = reveal_outcome(payload.cell_type)
    if payload.cell_type == 'mine':
        session.mine_score += points
    elif payload.cell_type == 'pro':
        session.pro_score += points

    db.session.add(MineGameAction(
        game_session_id=session.id,
        cell_x=payload.cell_x,
        cell_y=payload.cell_y,
        cell_type=payload.cell_type,
        action=payload.action,
        result=result,
    ))
    db.session.commit()

    return {
        'cellX': payload.cell_x,
        'cellY': payload.cell_y,
        'cellType': payload.cell_type,
        'result': result,
        'scoreIncrease': points,
        'currentMineScore': session.mine_score,
        'currentProScore': session.pro_score,
        'totalScore': session.mine_score + session.pro_score,
        'message': f'Cell revealed: {payload.cell_type}',
    }


def action_statistics(session) -> dict:
    actions = session.actions.order_by(MineGameAction.action_at).all()
    mines_found = sum(1 for a in actions if a.result == 'hit')
    pros_found = sum(1 for a in actions if a.result == 'pro_found')
    return {
        'minesFound': mines_found,
        'prosFound': pros_found,
        'totalActions': len(actions),
        'loggedMineScore': sum(reveal_outcome(a.cell_type)[1] for a in actions if a.cell_type == 'mine'),
        'loggedProScore': sum(reveal_outcome(a.cell_type)[1] for a in actions if a.cell_type == 'pro'),
    }


def complete_mine_game(session_id: str, final_mine_score: int, final_pro_score: int) -> dict:
    """Overwrite the stored mine/pro scores with the reported finals and stamp the team complete."""
    session = load_session(session_id)
    require_mine_eligibility(session)
    _require_open_game(session)

    session.mine_score = final_mine_score
    session.pro_score = final_pro_score
    advance_status(session, 'mine_completed')
    session.completed_at = utcnow()
    db.session.commit()

    stats = action_statistics(session)
    if (stats['loggedMineScore'], stats['loggedProScore']) != (final_mine_score, final_pro_score):
        current_app.logger.warning(
            f"[mine-complete] session={session.session_id} reported mine={final_mine_score} pro={final_pro_score} "
            f"but action log totals mine={stats['loggedMineScore']} pro={stats['loggedProScore']}"
        )

    total = grand_total(session.quiz_score, final_mine_score, final_pro_score)
    team = session.team
    team.game_completed = True
    team.mine_score = final_mine_score
    team.pro_score = final_pro_score
    team.total_score = total
    team.completed_at = utcnow()
    db.session.commit()

    current_app.logger.info(f"[mine-complete] session={session.session_id} grand_total={total}")
    notify_admins(team)
    return {
        'finalMineScore': final_mine_score,
        'finalProScore': final_pro_score,
        'totalScore': final_mine_score + final_pro_score,
        'quizScore': session.quiz_score,
        'grandTotal': total,
        'statistics': {
            'minesFound': stats['minesFound'],
            'prosFound': stats['prosFound'],
            'totalActions': stats['totalActions'],
            'completedAt': session.completed_at.isoformat(),
        },
        'message': 'Mine game completed successfully',
    }
