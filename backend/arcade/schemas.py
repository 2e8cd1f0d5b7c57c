"""
Request schemas.

Pydantic models validating every JSON body and query string the API
accepts. Field aliases match the camelCase keys used by the frontend.
"""

from typing import List, Literal, Optional

from flask import request
from pydantic import BaseModel, ConfigDict, Field, field_validator

from arcade.errors import ValidationFailed
from arcade.services.rules import TOTAL_QUESTIONS

Difficulty = Literal['easy', 'medium', 'hard']
CellType = Literal['mine', 'pro', 'blank']


class RequestSchema(BaseModel):
    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True, extra='ignore')


class BodySchema(RequestSchema):
    # JSON bodies must send real numbers and booleans, never "7" or true for an index
    model_config = ConfigDict(strict=True)


class TeamCredentials(BodySchema):
    team_name: str = Field(..., alias='teamName', min_length=1, max_length=50)
    access_code: str = Field(..., alias='accessCode', min_length=1, max_length=64)


class QuizQuestionsQuery(RequestSchema):
    difficulty: Difficulty


class SubmitAnswerPayload(BodySchema):
    session_id: str = Field(..., alias='sessionId', min_length=1)
    question_id: int = Field(..., alias='questionId', ge=1, le=8)
    question: str = Field(..., min_length=1)
    options: List[str] = Field(..., min_length=4, max_length=4)
    selected_answer: int = Field(..., alias='selectedAnswer', ge=0, le=3)
    correct_answer: int = Field(..., alias='correctAnswer', ge=0, le=3)


class CompleteQuizPayload(BodySchema):
    session_id: str = Field(..., alias='sessionId', min_length=1)
    score: int = Field(..., ge=0, le=8)
    total_questions: int = Field(TOTAL_QUESTIONS, alias='totalQuestions', ge=1, le=TOTAL_QUESTIONS)


class StartMineGamePayload(BodySchema):
    session_id: str = Field(..., alias='sessionId', min_length=1)
    difficulty: Optional[Difficulty] = None


class MineGameActionPayload(BodySchema):
    session_id: str = Field(..., alias='sessionId', min_length=1)
    cell_x: int = Field(..., alias='cellX', ge=0, le=2)
    cell_y: int = Field(..., alias='cellY', ge=0, le=2)
    cell_type: CellType = Field(..., alias='cellType')
    action: Literal['reveal', 'flag'] = 'reveal'


class CompleteMineGamePayload(BodySchema):
    session_id: str = Field(..., alias='sessionId', min_length=1)
    final_mine_score: int = Field(..., alias='finalMineScore', ge=0)
    final_pro_score: int = Field(..., alias='finalProScore', ge=0)


class QuestionPayload(BodySchema):
    difficulty: Difficulty
    question_id: int = Field(..., alias='questionId', ge=1, le=8)
    question: str = Field(..., min_length=1)
    options: List[str] = Field(..., min_length=4, max_length=4)
    correct_answer: int = Field(..., alias='correctAnswer', ge=0, le=3)

    @field_validator('options')
    @classmethod
    def _options_not_blank(cls, value):
        if any(not option.strip() for option in value):
            raise ValueError('Options must not be blank')
        return value


class QuestionUpdatePayload(QuestionPayload):
    id: int = Field(..., alias='_id')


class GenerateQuestionsPayload(BodySchema):
    difficulty: Difficulty
    persist: bool = False


class TimerSettingsPayload(BodySchema):
    easy: Optional[int] = Field(None, ge=10, le=3600)
    medium: Optional[int] = Field(None, ge=10, le=3600)
    hard: Optional[int] = Field(None, ge=10, le=3600)


class TeamLookupPayload(BodySchema):
    team_name: Optional[str] = Field(None, alias='teamName', min_length=1, max_length=50)
    team_id: Optional[int] = Field(None, alias='teamId')


class LeaderboardQuery(RequestSchema):
    difficulty: Optional[Difficulty] = None
    limit: int = Field(50, ge=1, le=500)
    sort_by: Literal['totalScore', 'grandTotal', 'quizScore', 'mineScore', 'proScore', 'startedAt'] = Field(
        'totalScore', alias='sortBy'
    )


class AnalyticsQuery(RequestSchema):
    time_range: Literal['1h', '24h', '7d', '30d', 'all'] = Field('24h', alias='timeRange')
    difficulty: Optional[Difficulty] = None


class DifficultyFilter(RequestSchema):
    difficulty: Optional[Difficulty] = None


def load_json(schema):
    """Validate the current request's JSON body against ``schema``."""
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationFailed('Invalid JSON format', error_code='INVALID_JSON')
    return schema.model_validate(data)


def load_args(schema):
    """Validate the current request's query string against ``schema``."""
    args = {key: value for key, value in request.args.items() if value != ''}
    return schema.model_validate(args)
