"""Read-only reporting for the admin dashboard: leaderboard, analytics and health."""

from datetime import timedelta

from sqlalchemy import case, func

from arcade import db
from arcade.models import GameSession, MineGameAction, QuizResponse, Team, utcnow
from arcade.services.rules import MINE_DONE_STATUSES, QUIZ_DONE_STATUSES, QUIZ_POINTS_PER_ANSWER, grand_total

TIME_RANGES = {
    '1h': timedelta(hours=1),
    '24h': timedelta(hours=24),
    '7d': timedelta(days=7),
    '30d': timedelta(days=30),
}


def _percent(part, whole):
    return (part / whole) * 100 if whole else 0


def _round2(value):
    return round(float(value or 0), 2)


def _response_tallies():
    return (
        db.session.query(
            QuizResponse.game_session_id.label('session_pk'),
            func.count(QuizResponse.id).label('answered'),
            func.sum(case((QuizResponse.is_correct.is_(True), 1), else_=0)).label('correct'),
        )
        .group_by(QuizResponse.game_session_id)
        .subquery()
    )


def _action_tallies():
    return (
        db.session.query(
            MineGameAction.game_session_id.label('session_pk'),
            func.count(MineGameAction.id).label('total'),
            func.sum(case((MineGameAction.result == 'hit', 1), else_=0)).label('hits'),
            func.sum(case((MineGameAction.result == 'pro_found', 1), else_=0)).label('pros'),
        )
        .group_by(MineGameAction.game_session_id)
        .subquery()
    )


LEADERBOARD_SORTS = {
    'totalScore': GameSession.total_score,
    'grandTotal': GameSession.quiz_score * QUIZ_POINTS_PER_ANSWER + GameSession.mine_score + GameSession.pro_score,
    'quizScore': GameSession.quiz_score,
    'mineScore': GameSession.mine_score,
    'proScore': GameSession.pro_score,
    'startedAt': GameSession.started_at,
}


def _leaderboard_row(session, team, answered, correct, total_actions, hits, pros):
    return {
        'teamName': team.team_name,
        'difficulty': team.difficulty,
        'sessionId': session.session_id,
        'status': session.status,
        'startedAt': session.started_at.isoformat() if session.started_at else None,
        'completedAt': session.completed_at.isoformat() if session.completed_at else None,
        'quizScore': session.quiz_score,
        'mineScore': session.mine_score,
        'proScore': session.pro_score,
        'totalScore': session.total_score,
        'grandTotal': grand_total(session.quiz_score, session.mine_score, session.pro_score),
        'canPlayMine': session.can_play_mine,
        'correctAnswers': correct,
        'totalQuestions': answered,
        'quizAccuracy': _percent(correct, answered),
        'minesFound': hits,
        'prosFound': pros,
        'totalMineActions': total_actions,
        'mineSuccessRate': _percent(hits + pros, total_actions),
    }


def leaderboard(difficulty=None, limit=50, sort_by='totalScore') -> dict:
    responses = _response_tallies()
    actions = _action_tallies()
    query = (
        db.session.query(
            GameSession,
            Team,
            func.coalesce(responses.c.answered, 0),
            func.coalesce(responses.c.correct, 0),
            func.coalesce(actions.c.total, 0),
            func.coalesce(actions.c.hits, 0),
            func.coalesce(actions.c.pros, 0),
        )
        .join(Team, GameSession.team_id == Team.id)
        .outerjoin(responses, responses.c.session_pk == GameSession.id)
        .outerjoin(actions, actions.c.session_pk == GameSession.id)
    )
    if difficulty:
        query = query.filter(Team.difficulty == difficulty)
    query = query.order_by(
        LEADERBOARD_SORTS[sort_by].desc(), GameSession.started_at.desc(), GameSession.id.desc()
    ).limit(limit)
    rows = [
        _leaderboard_row(session, team, int(answered), int(correct), int(total), int(hits), int(pros))
        for session, team, answered, correct, total, hits, pros in query.all()
    ]

    total_sessions = GameSession.query.count()
    completed_sessions = GameSession.query.filter(GameSession.status.in_(MINE_DONE_STATUSES)).count()
    return {
        'leaderboard': rows,
        'summary': {
            'totalTeams': Team.query.count(),
            'totalSessions': total_sessions,
            'completedSessions': completed_sessions,
            'completionRate': _percent(completed_sessions, total_sessions),
        },
        'filters': {'difficulty': difficulty, 'sortBy': sort_by, 'limit': limit},
    }


def _question_accuracy(since, difficulty):
    correct = func.sum(case((QuizResponse.is_correct.is_(True), 1), else_=0))
    query = (
        db.session.query(
            QuizResponse.question_id,
            Team.difficulty,
            func.count(QuizResponse.id),
            correct,
            func.min(QuizResponse.question),
        )
        .join(GameSession, QuizResponse.game_session_id == GameSession.id)
        .join(Team, GameSession.team_id == Team.id)
    )
    if since is not None:
        query = query.filter(QuizResponse.answered_at >= since)
    if difficulty:
        query = query.filter(Team.difficulty == difficulty)
    rows = query.group_by(QuizResponse.question_id, Team.difficulty).order_by(Team.difficulty, QuizResponse.question_id).all()
    return [
        {
            'questionId': question_id,
            'difficulty': diff,
            'question': question,
            'totalAnswers': int(total),
            'correctAnswers': int(correct_count or 0),
            'accuracy': _percent(int(correct_count or 0), int(total)),
        }
        for question_id, diff, total, correct_count, question in rows
    ]


def _mine_statistics(since, difficulty):
    query = (
        db.session.query(MineGameAction.result, func.count(MineGameAction.id))
        .join(GameSession, MineGameAction.game_session_id == GameSession.id)
        .join(Team, GameSession.team_id == Team.id)
    )
    if since is not None:
        query = query.filter(MineGameAction.action_at >= since)
    if difficulty:
        query = query.filter(Team.difficulty == difficulty)
    results = {'hit': 0, 'miss': 0, 'pro_found': 0}
    for result, count in query.group_by(MineGameAction.result).all():
        results[result] = int(count)

    scores = (
        db.session.query(func.avg(GameSession.mine_score), func.avg(GameSession.pro_score))
        .select_from(GameSession)
        .join(Team, GameSession.team_id == Team.id)
        .filter(GameSession.status.in_(MINE_DONE_STATUSES))
    )
    if since is not None:
        scores = scores.filter(GameSession.started_at >= since)
    if difficulty:
        scores = scores.filter(Team.difficulty == difficulty)
    avg_mine, avg_pro = scores.one()

    total = sum(results.values())
    successful = results['hit'] + results['pro_found']
    return {
        'totalActions': total,
        'minesHit': results['hit'],
        'prosFound': results['pro_found'],
        'misses': results['miss'],
        'successRate': _percent(successful, total),
        'averageMineScore': _round2(avg_mine),
        'averageProScore': _round2(avg_pro),
    }


def recent_activity(limit=10, since=None, difficulty=None):
    query = db.session.query(GameSession, Team).join(Team, GameSession.team_id == Team.id)
    if since is not None:
        query = query.filter(GameSession.started_at >= since)
    if difficulty:
        query = query.filter(Team.difficulty == difficulty)
    rows = query.order_by(GameSession.started_at.desc(), GameSession.id.desc()).limit(limit).all()
    return [
        {
            'teamName': team.team_name,
            'difficulty': team.difficulty,
            'status': session.status,
            'quizScore': session.quiz_score,
            'mineScore': session.mine_score,
            'proScore': session.pro_score,
            'startedAt': session.started_at.isoformat() if session.started_at else None,
            'completedAt': session.completed_at.isoformat() if session.completed_at else None,
        }
        for session, team in rows
    ]


def analytics(time_range='24h', difficulty=None) -> dict:
    delta = TIME_RANGES.get(time_range)
    since = utcnow() - delta if delta else None

    teams = Team.query
    if since is not None:
        teams = teams.filter(Team.created_at >= since)
    if difficulty:
        teams = teams.filter(Team.difficulty == difficulty)

    sessions = db.session.query(GameSession).select_from(GameSession).join(Team, GameSession.team_id == Team.id)
    if since is not None:
        sessions = sessions.filter(GameSession.started_at >= since)
    if difficulty:
        sessions = sessions.filter(Team.difficulty == difficulty)

    total_sessions = sessions.count()
    completed_quizzes = sessions.filter(GameSession.status.in_(QUIZ_DONE_STATUSES)).count()
    completed_mine_games = sessions.filter(GameSession.status.in_(MINE_DONE_STATUSES)).count()

    avg_score, max_score, min_score = (
        sessions.filter(GameSession.quiz_score > 0)
        .with_entities(func.avg(GameSession.quiz_score), func.max(GameSession.quiz_score), func.min(GameSession.quiz_score))
        .one()
    )

    distribution = {
        diff: int(count)
        for diff, count in teams.with_entities(Team.difficulty, func.count(Team.id)).group_by(Team.difficulty).all()
    }

    return {
        'overview': {
            'totalTeams': teams.count(),
            'totalSessions': total_sessions,
            'completedQuizzes': completed_quizzes,
            'completedMineGames': completed_mine_games,
            'quizCompletionRate': _percent(completed_quizzes, total_sessions),
            'mineGameCompletionRate': _percent(completed_mine_games, completed_quizzes),
        },
        'quizStatistics': {
            'averageScore': _round2(avg_score),
            'highestScore': int(max_score or 0),
            'lowestScore': int(min_score or 0),
            'questionAccuracy': _question_accuracy(since, difficulty),
        },
        'mineGameStatistics': _mine_statistics(since, difficulty),
        'difficultyDistribution': distribution,
        'recentActivity': recent_activity(10, since, difficulty),
        'filters': {'timeRange': time_range, 'difficulty': difficulty},
    }


def database_counts() -> dict:
    return {
        'teams': Team.query.count(),
        'sessions': GameSession.query.count(),
        'activeSessions': GameSession.query.filter_by(status='active').count(),
        'completedSessions': GameSession.query.filter(GameSession.status.in_(MINE_DONE_STATUSES)).count(),
    }
