"""Admin dashboard routes: question bank, timers, leaderboard, analytics and team lookup."""

from flask import Blueprint, current_app, request

from arcade.errors import ValidationFailed, success
from arcade.middleware import admin_required
from arcade.models import MineGameAction, QuizResponse
from arcade.schemas import (
    AnalyticsQuery,
    DifficultyFilter,
    GenerateQuestionsPayload,
    LeaderboardQuery,
    QuestionPayload,
    QuestionUpdatePayload,
    TeamLookupPayload,
    TimerSettingsPayload,
    load_args,
    load_json,
)
from arcade.services import question_bank, reports
from arcade.services.teams import get_team, list_teams

admin = Blueprint('admin', __name__)


@admin.route('/questions', methods=['GET'])
@admin_required
def get_questions():
    query = load_args(DifficultyFilter)
    questions = question_bank.list_questions(query.difficulty)
    return success([q.to_dict() for q in questions])


@admin.route('/questions', methods=['POST'])
@admin_required
def create_question():
    payload = load_json(QuestionPayload)
    question = question_bank.create_question(payload)
    current_app.logger.info(f"[admin] created {question.difficulty} question {question.question_id}")
    return success(question.to_dict(), 'Question created successfully', status=201)


@admin.route('/questions', methods=['PUT'])
@admin_required
def update_question():
    payload = load_json(QuestionUpdatePayload)
    question = question_bank.update_question(payload)
    current_app.logger.info(f"[admin] updated question pk={question.id}")
    return success(question.to_dict(), 'Question updated successfully')


@admin.route('/questions', methods=['DELETE'])
@admin_required
def delete_question():
    raw_id = request.args.get('id', '').strip()
    if not raw_id:
        raise ValidationFailed('Question ID is required', error_code='MISSING_ID')
    try:
        question_pk = int(raw_id)
    except ValueError:
        raise ValidationFailed('Question ID must be an integer', error_code='INVALID_ID')
    question_bank.delete_question(question_pk)
    current_app.logger.info(f"[admin] deleted question pk={question_pk}")
    return success({'id': question_pk}, 'Question deleted successfully')


@admin.route('/questions/generate', methods=['POST'])
@admin_required
def generate_questions():
    payload = load_json(GenerateQuestionsPayload)
    data = question_bank.generate_questions(payload.difficulty, payload.persist)
    return success(data, f"Generated {len(data['questions'])} {payload.difficulty} questions")


@admin.route('/timers', methods=['GET'])
@admin_required
def get_timers():
    return success(question_bank.timer_settings())


@admin.route('/timers', methods=['PUT'])
@admin_required
def update_timers():
    payload = load_json(TimerSettingsPayload)
    timers = question_bank.update_timer_settings(payload.model_dump())
    current_app.logger.info(f"[admin] timers now {timers}")
    return success(timers, 'Timer settings updated successfully')


@admin.route('/leaderboard', methods=['GET'])
@admin_required
def leaderboard():
    query = load_args(LeaderboardQuery)
    return success(reports.leaderboard(query.difficulty, query.limit, query.sort_by))


@admin.route('/analytics', methods=['GET'])
@admin_required
def analytics():
    query = load_args(AnalyticsQuery)
    return success(reports.analytics(query.time_range, query.difficulty))


@admin.route('/teams', methods=['GET'])
@admin_required
def get_teams():
    query = load_args(DifficultyFilter)
    return success(list_teams(query.difficulty))


@admin.route('/teams', methods=['POST'])
@admin_required
def lookup_team():
    payload = load_json(TeamLookupPayload)
    team = get_team(team_name=payload.team_name, team_id=payload.team_id)
    data = team.to_dict()
    data['sessions'] = [
        dict(
            session.to_dict(),
            responses=[r.to_dict() for r in session.responses.order_by(QuizResponse.question_id)],
            actions=[a.to_dict() for a in session.actions.order_by(MineGameAction.action_at, MineGameAction.id)],
        )
        for session in team.sessions
    ]
    return success(data)
