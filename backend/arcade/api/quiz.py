from flask import Blueprint

from arcade.errors import success
from arcade.schemas import CompleteQuizPayload, QuizQuestionsQuery, SubmitAnswerPayload, load_args, load_json
from arcade.services import quiz as quiz_service

quiz = Blueprint('quiz', __name__)


@quiz.route('/questions', methods=['GET'])
def get_questions():
    query = load_args(QuizQuestionsQuery)
    return success(quiz_service.get_quiz(query.difficulty))


@quiz.route('/submit-answer', methods=['POST'])
def submit_answer():
    payload = load_json(SubmitAnswerPayload)
    data = quiz_service.submit_answer(payload)
    return success(data, data['message'])


@quiz.route('/complete', methods=['POST'])
def complete():
    payload = load_json(CompleteQuizPayload)
    data = quiz_service.complete_quiz(payload.session_id, payload.score, payload.total_questions)
    return success(data, data['message'])
