from flask import current_app

from arcade import db
from arcade.errors import Conflict
from arcade.models import QuizResponse, utcnow
from arcade.services.question_bank import questions_for, seed_default_questions, timer_for
from arcade.services.rules import MINE_UNLOCK_THRESHOLDS, can_play_mine
from arcade.services.sessions import advance_status, load_session
from arcade.socketio_events import notify_admins


def get_quiz(difficulty: str) -> dict:
    questions = questions_for(difficulty)
    if not questions:
        seed_default_questions(difficulty)
        questions = questions_for(difficulty)
    return {
        'questions': [q.to_quiz_dict() for q in questions],
        'difficulty': difficulty,
        'totalQuestions': len(questions),
        'timeLimit': timer_for(difficulty),
    }


def submit_answer(payload) -> dict:
    """Upsert the response for (session, question).

    ``is_correct`` is derived by the model hook from the stored indices.
    """
    session = load_session(payload.session_id)
    response = QuizResponse.query.filter_by(game_session_id=session.id, question_id=payload.question_id).first()
    if response:
        response.selected_answer = payload.selected_answer
        response.answered_at = utcnow()
    else:
        response = QuizResponse(
            game_session_id=session.id,
            question_id=payload.question_id,
            question=payload.question,
            options=list(payload.options),
            selected_answer=payload.selected_answer,
            correct_answer=payload.correct_answer,
        )
        db.session.add(response)
    db.session.commit()
    return {
        'questionId': response.question_id,
        'isCorrect': response.is_correct,
        'message': 'Answer submitted successfully',
    }


def verified_score(session) -> int:
    return QuizResponse.query.filter_by(game_session_id=session.id, is_correct=True).count()


def complete_quiz(session_id: str, score: int, total_questions: int) -> dict:
    session = load_session(session_id)
    if session.status != 'active':
        raise Conflict('Quiz already completed for this session', error_code='QUIZ_ALREADY_COMPLETED')
    team = session.team
    difficulty = team.difficulty
    eligible = can_play_mine(score, difficulty)

    session.quiz_score = score
    session.can_play_mine = eligible
    advance_status(session, 'quiz_completed')
    db.session.commit()

    verified = verified_score(session)
    if verified != score:
        current_app.logger.warning(
            f"[quiz-complete] session={session.session_id} reported score={score} but {verified} correct responses stored"
        )

    team.questions_correct = verified
    team.total_questions = total_questions
    team.quiz_score = score
    db.session.commit()

    current_app.logger.info(f"[quiz-complete] session={session.session_id} score={score} can_play_mine={eligible}")
    notify_admins(team)
    return {
        'score': score,
        'totalQuestions': total_questions,
        'canPlayMine': eligible,
        'difficulty': difficulty,
        'verifiedScore': verified,
        'requirements': MINE_UNLOCK_THRESHOLDS[difficulty],
        'message': 'Quiz completed! Mine game unlocked!' if eligible else 'Quiz completed! Score not sufficient for mine game.',
    }
